"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

CLI context for Merkle Partial.

Provides shared context object and decorators for CLI commands.
"""

import functools
import sys

import click

from merkle_partial.exceptions import MerklePartialError


# Global context object to share configuration across commands
class CLIContext:
    """Context object for CLI commands."""
    
    def __init__(self):
        self.config = None
        self.config_path = None
        self.verbose = False


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def validate_root_hex(ctx, param, value):
    """
    Validate that a root is 32 bytes of hex.
    
    Args:
        ctx: Click context
        param: Click parameter
        value: Value to validate
        
    Returns:
        Root as bytes
        
    Raises:
        click.BadParameter: If the value is not 64 hex characters
    """
    if value is None:
        return value
    
    text = value.strip()
    if text.startswith("0x"):
        text = text[2:]
    
    try:
        root = bytes.fromhex(text)
    except ValueError:
        raise click.BadParameter("root must be hex encoded")
    
    if len(root) != 32:
        raise click.BadParameter(f"root must be 32 bytes, got {len(root)}")
    
    return root


def handle_merkle_partial_error(func):
    """
    Decorator to handle MerklePartialError exceptions in CLI commands.
    
    Catches MerklePartialError exceptions and displays user-friendly error messages.
    
    Args:
        func: CLI command function to wrap
        
    Returns:
        Wrapped function
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MerklePartialError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    
    return wrapper

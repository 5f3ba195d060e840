"""
CLI entry point for Merkle Partial.

Provides command-line tools for checking and completing partial proof files.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from merkle_partial._version import __version__
from merkle_partial.cli.context import CLIContext, pass_context
from merkle_partial.config.settings import get_default_config_path, load_config
from merkle_partial.exceptions import InvalidConfigurationError
from merkle_partial.logging_config import setup_logging


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (overrides configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='merkle-partial')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], verbose: bool):
    """
    Merkle Partial - verify and complete sparse Merkle proofs.

    Proof files are JSON objects with an "indices" list and a matching
    "chunks" list of 32-byte hex strings.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None

    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    effective_log_level = log_level.upper() if log_level else ctx.config.logging.level
    log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None
    setup_logging(
        level=effective_log_level,
        log_file=log_file,
        json_format=ctx.config.logging.format == "json",
    )

    if verbose:
        logger = logging.getLogger("merkle_partial")
        logger.info(f"Loaded configuration from: {ctx.config_path or 'defaults'}")
        logger.info(f"Log level: {effective_log_level}")


# Import and register proof commands
from merkle_partial.cli.proof import fill, inspect, root, verify
cli.add_command(verify)
cli.add_command(root)
cli.add_command(fill)
cli.add_command(inspect)


if __name__ == '__main__':
    cli()

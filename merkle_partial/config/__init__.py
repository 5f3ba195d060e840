"""
Configuration management for Merkle Partial.

Handles loading and validation of configuration files.
"""

from merkle_partial.config.settings import (
    LoggingConfig,
    MerklePartialConfig,
    ProofConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "MerklePartialConfig",
    "ProofConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]

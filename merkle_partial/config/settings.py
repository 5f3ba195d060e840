"""
Configuration management for Merkle Partial.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from merkle_partial.exceptions import InvalidConfigurationError
from merkle_partial.logging_config import get_logger

logger = get_logger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["console", "json"]
MAX_SUPPORTED_TREE_DEPTH = 256


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${MERKLE_PARTIAL_LOG_LEVEL}" -> value of MERKLE_PARTIAL_LOG_LEVEL env var
        "${MERKLE_PARTIAL_LOG_LEVEL:INFO}" -> value of the env var or "INFO" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass
class ProofConfig:
    """Partial proof handling configuration."""

    max_tree_depth: int = 64  # Deepest index accepted from proof files
    fill_on_load: bool = False  # Derive missing internal nodes right after loading


@dataclass
class MerklePartialConfig:
    """Main Merkle Partial configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    proof: ProofConfig = field(default_factory=ProofConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.merkle_partial/config.yaml")


def get_default_config() -> MerklePartialConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        MerklePartialConfig: Default configuration object
    """
    return MerklePartialConfig()


def load_config(config_path: Optional[str] = None) -> MerklePartialConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        MerklePartialConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(config_path)

    if not os.path.exists(config_path):
        logger.debug(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        )
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        )

    if config_data is None:
        logger.debug(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError:
        raise
    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        )

    logger.debug(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _build_config_from_dict(config_data: Dict[str, Any]) -> MerklePartialConfig:
    """
    Build configuration object from dictionary.

    Args:
        config_data: Configuration dictionary from YAML

    Returns:
        MerklePartialConfig: Configuration object
    """
    if not isinstance(config_data, dict):
        raise InvalidConfigurationError("Configuration root must be a mapping")

    logging_data = config_data.get('logging') or {}
    logging_config = LoggingConfig(
        level=str(logging_data.get('level', "INFO")),
        file=str(logging_data.get('file', "")),
        format=str(logging_data.get('format', "console")),
    )

    proof_data = config_data.get('proof') or {}
    proof_config = ProofConfig(
        max_tree_depth=int(proof_data.get('max_tree_depth', 64)),
        fill_on_load=_to_bool(proof_data.get('fill_on_load', False)),
    )

    return MerklePartialConfig(logging=logging_config, proof=proof_config)


def _to_bool(value: Any) -> bool:
    # env var expansion leaves strings behind
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _validate_config(config: MerklePartialConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if config.logging.level.upper() not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"logging level must be one of {VALID_LOG_LEVELS}, "
            f"got '{config.logging.level}'"
        )

    if config.logging.format not in VALID_LOG_FORMATS:
        raise InvalidConfigurationError(
            f"logging format must be one of {VALID_LOG_FORMATS}, "
            f"got '{config.logging.format}'"
        )

    if not 1 <= config.proof.max_tree_depth <= MAX_SUPPORTED_TREE_DEPTH:
        raise InvalidConfigurationError(
            f"max_tree_depth must be between 1 and {MAX_SUPPORTED_TREE_DEPTH}, "
            f"got {config.proof.max_tree_depth}"
        )

"""
Logging configuration for Merkle Partial.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development. Supports correlation IDs for
tracing a verify-mutate-refresh cycle across calls.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict


# Context variable for correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add correlation ID to log events if present in context.

    Args:
        logger: Logger instance
        method_name: Name of the logging method
        event_dict: Event dictionary to modify

    Returns:
        Modified event dictionary with correlation_id if available
    """
    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: Optional correlation ID. If None, generates a new UUID.

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear correlation ID from the current context."""
    correlation_id_var.set(None)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return correlation_id_var.get()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for Merkle Partial.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to stderr.
        json_format: If True, use JSON format. If False, use human-readable format.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Structured logger instance.
    """
    if name.startswith("merkle_partial"):
        return structlog.get_logger(name)
    return structlog.get_logger(f"merkle_partial.{name}")


# Convenience functions for common logging patterns

def log_partial_load(
    logger: structlog.stdlib.BoundLogger,
    chunk_count: int,
    cache_size: int,
    **kwargs: Any,
) -> None:
    """
    Log a serialized partial being loaded into a cache.

    Args:
        logger: Logger instance
        chunk_count: Number of chunks in the serialized partial
        cache_size: Number of chunks held by the cache after loading
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "partial_load",
        "chunk_count": chunk_count,
        "cache_size": cache_size,
    }
    log_data.update(kwargs)

    logger.debug("partial_load", **log_data)


def log_partial_extract(
    logger: structlog.stdlib.BoundLogger,
    path: str,
    leaf_index: int,
    proof_size: int,
    **kwargs: Any,
) -> None:
    """
    Log extraction of a proof for a path.

    Args:
        logger: Logger instance
        path: Textual form of the requested path
        leaf_index: Tree position the path resolved to
        proof_size: Number of chunks in the extracted proof
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "partial_extract",
        "path": path,
        "leaf_index": leaf_index,
        "proof_size": proof_size,
    }
    log_data.update(kwargs)

    logger.debug("partial_extract", **log_data)


def log_cache_recompute(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    updated: int,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a fill or refresh of internal nodes.

    Args:
        logger: Logger instance
        operation: Recompute operation ("fill" or "refresh")
        updated: Number of internal chunks written
        duration_ms: Duration in milliseconds
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "cache_recompute",
        "operation": operation,
        "updated": updated,
        "duration_ms": duration_ms,
    }
    log_data.update(kwargs)

    logger.debug("cache_recompute", **log_data)


def log_partial_verification(
    logger: structlog.stdlib.BoundLogger,
    root: str,
    success: bool,
    duration_ms: float,
    failure_reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a partial verification against a claimed root.

    Args:
        logger: Logger instance
        root: Claimed root (hex encoded)
        success: Whether verification succeeded
        duration_ms: Verification duration in milliseconds
        failure_reason: Reason for failure if not successful
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "partial_verification",
        "root": root,
        "success": success,
        "duration_ms": duration_ms,
    }

    if failure_reason is not None:
        log_data["failure_reason"] = failure_reason

    log_data.update(kwargs)

    if success:
        logger.info("partial_verification", **log_data)
    else:
        logger.warning("partial_verification_failed", **log_data)

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Exception hierarchy for Merkle Partial.

All custom exceptions inherit from MerklePartialError base class.
"""


class MerklePartialError(Exception):
    """Base exception for all Merkle Partial errors."""
    pass


# Path Errors
class PathError(MerklePartialError):
    """Base exception for path-related errors."""
    pass


class EmptyPathError(PathError):
    """Raised when a path argument has zero steps."""

    def __init__(self, message: str = "Path must contain at least one step"):
        super().__init__(message)


class InvalidPathError(PathError):
    """Raised when a path step does not resolve against the overlay."""

    def __init__(self, step, message: str = None):
        self.step = step
        super().__init__(message or f"Invalid path step: {step!r}")


# Cache Errors
class CacheError(MerklePartialError):
    """Base exception for chunk cache errors."""
    pass


class ChunkNotLoadedError(CacheError):
    """Raised when an operation touches a tree position whose chunk is not cached."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Chunk not loaded at index {index}")


class InvalidChunkError(CacheError, ValueError):
    """Raised when chunk bytes have the wrong length."""
    pass


# Tree Errors
class TreeIndexError(MerklePartialError, ValueError):
    """Raised when a tree position has no parent, sibling or is negative."""
    pass


# Serialization Errors
class SerializationError(MerklePartialError, ValueError):
    """Raised when a serialized partial is malformed."""
    pass


# Configuration Errors
class ConfigurationError(MerklePartialError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass

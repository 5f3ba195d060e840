"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Merkle Partial - sparse, verifiable views of SSZ-style Merkle trees

Merkle Partial holds only the tree chunks needed to prove or mutate specific
fields of a large object, verifies them against a known root, and recomputes
the root after changes.
"""

from merkle_partial._version import __version__
from merkle_partial.cache import BYTES_PER_CHUNK, ChunkCache, hash_children
from merkle_partial.exceptions import (
    ChunkNotLoadedError,
    EmptyPathError,
    InvalidPathError,
    MerklePartialError,
)
from merkle_partial.field import Composite, Length, Primitive, PrimitiveEntry
from merkle_partial.overlay import MerkleTreeOverlay
from merkle_partial.partial import Partial, bytes_at_path
from merkle_partial.path import Ident, Index, parse_path
from merkle_partial.serialized import SerializedPartial

__all__ = [
    "__version__",
    "BYTES_PER_CHUNK",
    "ChunkCache",
    "hash_children",
    "ChunkNotLoadedError",
    "EmptyPathError",
    "InvalidPathError",
    "MerklePartialError",
    "Composite",
    "Length",
    "Primitive",
    "PrimitiveEntry",
    "MerkleTreeOverlay",
    "Partial",
    "bytes_at_path",
    "Ident",
    "Index",
    "parse_path",
    "SerializedPartial",
]

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Serialized form of a partial proof.

A serialized partial is a list of tree positions paired 1:1 with a flat byte
buffer. The i-th position's chunk is ``chunks[32 * i : 32 * i + 32]``. There is
no header or checksum; integrity is checked against a root with ``is_valid``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from merkle_partial.cache import BYTES_PER_CHUNK, ChunkCache
from merkle_partial.exceptions import SerializationError
from merkle_partial.tree_arithmetic import depth


@dataclass
class SerializedPartial:
    """
    Tree positions and their chunks, in matching order.

    Attributes:
        indices: Tree positions, without duplicates
        chunks: Concatenated chunks, 32 bytes per position
    """
    indices: List[int] = field(default_factory=list)
    chunks: bytes = b""

    def __post_init__(self):
        self.indices = list(self.indices)
        self.chunks = bytes(self.chunks)

        if len(self.chunks) != BYTES_PER_CHUNK * len(self.indices):
            raise SerializationError(
                f"Expected {BYTES_PER_CHUNK * len(self.indices)} chunk bytes for "
                f"{len(self.indices)} indices, got {len(self.chunks)}"
            )
        if any(index < 0 for index in self.indices):
            raise SerializationError("Indices must be non-negative")
        if len(set(self.indices)) != len(self.indices):
            raise SerializationError("Indices must not contain duplicates")

    def __len__(self) -> int:
        return len(self.indices)

    def chunk_at(self, position: int) -> bytes:
        """Return the chunk paired with the ``position``-th index."""
        start = position * BYTES_PER_CHUNK
        return self.chunks[start:start + BYTES_PER_CHUNK]

    def pairs(self) -> Iterator[Tuple[int, bytes]]:
        for position, index in enumerate(self.indices):
            yield index, self.chunk_at(position)

    def max_depth(self) -> int:
        """Return the depth of the deepest index (0 when empty)."""
        return max((depth(index) for index in self.indices), default=0)

    def to_cache(self) -> ChunkCache:
        """Build a new cache holding every chunk of this partial."""
        cache = ChunkCache()
        for index, chunk in self.pairs():
            cache.insert(index, chunk)
        return cache

    @classmethod
    def from_cache(cls, cache: ChunkCache) -> "SerializedPartial":
        """Serialize every chunk held by ``cache``, in ascending index order."""
        items = cache.items()
        return cls(
            indices=[index for index, _ in items],
            chunks=b"".join(chunk for _, chunk in items),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary with hex-encoded chunks."""
        return {
            "indices": list(self.indices),
            "chunks": [chunk.hex() for _, chunk in self.pairs()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SerializedPartial":
        """
        Build a serialized partial from the output of ``to_dict``.

        Raises:
            SerializationError: If fields are missing or chunks are not hex
        """
        try:
            indices = [int(index) for index in data["indices"]]
            chunks = [bytes.fromhex(chunk) for chunk in data["chunks"]]
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Malformed serialized partial: {e}") from e

        if len(chunks) != len(indices):
            raise SerializationError(
                f"Got {len(indices)} indices but {len(chunks)} chunks"
            )
        for index, chunk in zip(indices, chunks):
            if len(chunk) != BYTES_PER_CHUNK:
                raise SerializationError(
                    f"Chunk for index {index} must be {BYTES_PER_CHUNK} bytes, got {len(chunk)}"
                )

        return cls(indices=indices, chunks=b"".join(chunks))

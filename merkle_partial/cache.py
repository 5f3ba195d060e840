"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Sparse chunk cache over a zero-indexed binary Merkle tree.

The cache maps tree positions to 32-byte chunks and only holds the positions
it has been given or has derived. It supports:
- Insertion and lookup of chunks
- Validity checking against a claimed root without mutation
- Filling absent internal nodes that can be derived from cached children
- Refreshing every internal node from the current leaves
"""

import hashlib
import heapq
import time
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from merkle_partial.exceptions import ChunkNotLoadedError, InvalidChunkError
from merkle_partial.logging_config import get_logger, log_cache_recompute
from merkle_partial.tree_arithmetic import ROOT_INDEX, children_indices, parent_index

logger = get_logger(__name__)

BYTES_PER_CHUNK = 32


def hash_children(left: bytes, right: bytes) -> bytes:
    """
    Hash two sibling chunks into their parent chunk using SHA-256.

    Args:
        left: Chunk of the left child
        right: Chunk of the right child

    Returns:
        32-byte parent chunk
    """
    return hashlib.sha256(left + right).digest()


class ChunkCache:
    """
    Sparse mapping from tree position to 32-byte chunk.

    Absence of a position is a normal state. Callers decide whether a missing
    chunk is fatal for the operation they are performing.

    Example:
        >>> cache = ChunkCache()
        >>> cache.insert(1, b"\\x01" * 32)
        >>> cache.insert(2, b"\\x02" * 32)
        >>> cache.fill()
        1
        >>> cache.root() == hash_children(b"\\x01" * 32, b"\\x02" * 32)
        True
    """

    def __init__(self, chunks: Optional[Mapping[int, bytes]] = None):
        self._chunks: Dict[int, bytes] = {}
        if chunks:
            for index, chunk in chunks.items():
                self.insert(index, chunk)

    def insert(self, index: int, chunk: bytes) -> None:
        """
        Store ``chunk`` at ``index``, replacing any existing chunk.

        Raises:
            InvalidChunkError: If ``chunk`` is not exactly 32 bytes
        """
        if len(chunk) != BYTES_PER_CHUNK:
            raise InvalidChunkError(
                f"Chunk at index {index} must be {BYTES_PER_CHUNK} bytes, got {len(chunk)}"
            )
        if index < 0:
            raise InvalidChunkError(f"Chunk index must be non-negative, got {index}")

        self._chunks[index] = bytes(chunk)

    def get(self, index: int) -> Optional[bytes]:
        return self._chunks.get(index)

    def remove(self, index: int) -> Optional[bytes]:
        """Remove and return the chunk at ``index`` if present."""
        return self._chunks.pop(index, None)

    def root(self) -> Optional[bytes]:
        """Return the stored root chunk. It is not recomputed."""
        return self._chunks.get(ROOT_INDEX)

    def indices(self) -> List[int]:
        return sorted(self._chunks)

    def items(self) -> List[Tuple[int, bytes]]:
        return [(index, self._chunks[index]) for index in self.indices()]

    def copy(self) -> "ChunkCache":
        other = ChunkCache()
        other._chunks = dict(self._chunks)
        return other

    def clear(self) -> None:
        self._chunks.clear()

    def __contains__(self, index: object) -> bool:
        return index in self._chunks

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChunkCache):
            return NotImplemented
        return self._chunks == other._chunks

    def __repr__(self) -> str:
        return f"ChunkCache(size={len(self._chunks)})"

    def is_valid(self, root: bytes) -> bool:
        """
        Check that the cached chunks are consistent with ``root``.

        Every internal position whose children are both cached is recomputed
        bottom-up on a private copy. A stored chunk that disagrees with its
        recomputed value makes the cache invalid. The cache is not modified.

        Args:
            root: Claimed root chunk

        Returns:
            True if the chunk at position 0 ends up equal to ``root``
        """
        chunks = dict(self._chunks)
        queue = _ParentQueue(chunks)

        for position in queue:
            left, right = children_indices(position)
            if left not in chunks or right not in chunks:
                continue

            computed = hash_children(chunks[left], chunks[right])
            stored = chunks.get(position)
            if stored is not None:
                if stored != computed:
                    logger.debug("inconsistent_chunk", index=position)
                    return False
                continue

            chunks[position] = computed
            queue.push_parent(position)

        return chunks.get(ROOT_INDEX) == root

    def fill(self) -> int:
        """
        Insert every absent internal node derivable from cached children.

        Runs to a fixed point. Branches that cannot be derived stay partial.
        Existing chunks are never overwritten, so a second call inserts nothing.

        Returns:
            Number of chunks inserted
        """
        start = time.perf_counter()
        inserted = 0

        queue = _ParentQueue(list(self._chunks))

        for position in queue:
            if position in self._chunks:
                continue

            left, right = children_indices(position)
            if left not in self._chunks or right not in self._chunks:
                continue

            self._chunks[position] = hash_children(self._chunks[left], self._chunks[right])
            inserted += 1
            queue.push_parent(position)

        log_cache_recompute(
            logger,
            operation="fill",
            updated=inserted,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return inserted

    def refresh(self) -> int:
        """
        Recompute every internal node and the root from the current leaves.

        A leaf is a cached position with no cached descendant. Every ancestor
        of a cached position is recomputed and overwritten. The cache is left
        unchanged if any required child is missing.

        Returns:
            Number of internal chunks written

        Raises:
            ChunkNotLoadedError: If a child needed by an ancestor is absent
        """
        start = time.perf_counter()

        ancestors: Set[int] = set()
        for index in self._chunks:
            while index != ROOT_INDEX:
                index = parent_index(index)
                if index in ancestors:
                    break
                ancestors.add(index)

        computed: Dict[int, bytes] = {}
        for position in sorted(ancestors, reverse=True):
            left, right = children_indices(position)
            computed[position] = hash_children(
                self._child_chunk(left, ancestors, computed),
                self._child_chunk(right, ancestors, computed),
            )

        self._chunks.update(computed)

        log_cache_recompute(
            logger,
            operation="refresh",
            updated=len(computed),
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return len(computed)

    def _child_chunk(self, index: int, ancestors: Set[int], computed: Dict[int, bytes]) -> bytes:
        if index in ancestors:
            return computed[index]
        chunk = self._chunks.get(index)
        if chunk is None:
            raise ChunkNotLoadedError(index)
        return chunk


class _ParentQueue:
    """
    Max-heap of parent positions, each queued at most once.

    Children always have larger indices than their parent, so popping the
    largest position first visits every node after all of its descendants.
    Parents queued while iterating keep that order because they are smaller
    than the position that queued them.
    """

    def __init__(self, children: Iterable[int]):
        self._heap: List[int] = []
        self._queued: Set[int] = set()
        for child in children:
            self.push_parent(child)

    def push_parent(self, child: int) -> None:
        if child == ROOT_INDEX:
            return
        position = parent_index(child)
        if position not in self._queued:
            self._queued.add(position)
            heapq.heappush(self._heap, -position)

    def __iter__(self) -> Iterator[int]:
        while self._heap:
            yield -heapq.heappop(self._heap)

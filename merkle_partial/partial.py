"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Partial view of a Merkle tree bound to a type overlay.

A Partial holds only the chunks needed to prove or mutate specific fields.
It supports:
- Loading serialized partial proofs into its cache
- Extracting minimal proofs for one or more paths
- Reading and writing field bytes, including values packed below chunk size
- Verifying against a root, filling derivable nodes and refreshing the root
"""

from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

from merkle_partial.cache import BYTES_PER_CHUNK, ChunkCache
from merkle_partial.exceptions import (
    ChunkNotLoadedError,
    EmptyPathError,
    InvalidChunkError,
    InvalidPathError,
)
from merkle_partial.field import Composite, Length, Primitive, node_index
from merkle_partial.logging_config import get_logger, log_partial_extract, log_partial_load
from merkle_partial.overlay.base import MerkleTreeOverlay
from merkle_partial.path import Index, PathStep, format_path, require_path
from merkle_partial.serialized import SerializedPartial
from merkle_partial.tree_arithmetic import (
    ROOT_INDEX,
    children_indices,
    parent_index,
    sibling_index,
)

logger = get_logger(__name__)

PathLike = Iterable[Union[PathStep, str, int]]


class Partial:
    """
    Sparse, verifiable view of one object's Merkle tree.

    A Partial is not safe for concurrent mutation. Callers sharing one must
    hold exclusive access for a whole verify-mutate-refresh cycle.

    Example:
        >>> header = ContainerOverlay([("slot", uint64), ("state_root", bytes32)])
        >>> partial = Partial(header, serialized)
        >>> partial.is_valid(known_root)
        True
        >>> partial.set_bytes(["slot"], (12).to_bytes(8, "little"))
        >>> _ = partial.refresh()
        >>> new_root = partial.root()
    """

    def __init__(self, overlay: MerkleTreeOverlay, serialized: Optional[SerializedPartial] = None):
        """
        Create a Partial bound to ``overlay``.

        Args:
            overlay: Overlay describing the object's layout
            serialized: Optional proof to load into the empty cache
        """
        self.overlay = overlay
        self._cache = ChunkCache()

        if serialized is not None:
            self.load_partial(serialized)

    @property
    def cache(self) -> ChunkCache:
        return self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __repr__(self) -> str:
        return f"Partial(overlay={self.overlay!r}, chunks={len(self._cache)})"

    def load_partial(self, serialized: SerializedPartial) -> None:
        """
        Insert every chunk of ``serialized`` into the cache.

        No validation against the overlay or a root happens here; call
        ``is_valid`` for that.
        """
        for index, chunk in serialized.pairs():
            self._cache.insert(index, chunk)

        log_partial_load(logger, chunk_count=len(serialized), cache_size=len(self._cache))

    def extract_partial(self, path: PathLike) -> SerializedPartial:
        """
        Build the minimal proof that the value at ``path`` is part of this tree.

        The proof holds the path's leaf chunk and the sibling of every node on
        the way to the root.

        Raises:
            EmptyPathError: If ``path`` is empty
            InvalidPathError: If ``path`` does not resolve
            ChunkNotLoadedError: If the leaf or a needed sibling is not cached
        """
        path = require_path(path)
        visitor = node_index(self.overlay.resolve(path))

        indices: List[int] = [visitor]
        chunks: List[bytes] = [self._require_chunk(visitor)]
        included: Set[int] = {visitor}

        while visitor > ROOT_INDEX:
            sibling = sibling_index(visitor)
            left, right = children_indices(parent_index(sibling))

            if not (left in included and right in included):
                indices.append(sibling)
                chunks.append(self._require_chunk(sibling))
                included.add(sibling)

            visitor = parent_index(visitor)

        log_partial_extract(
            logger,
            path=format_path(path),
            leaf_index=indices[0],
            proof_size=len(indices),
        )
        return SerializedPartial(indices=indices, chunks=b"".join(chunks))

    def extract_multi_partial(self, paths: Sequence[PathLike]) -> SerializedPartial:
        """
        Build one minimal proof covering several paths.

        Siblings that are themselves requested leaves, or ancestors of one,
        are derivable by the verifier and are left out.

        Raises:
            EmptyPathError: If ``paths`` is empty or any path is empty
            InvalidPathError: If a path does not resolve
            ChunkNotLoadedError: If a leaf or a needed sibling is not cached
        """
        if not paths:
            raise EmptyPathError("At least one path is required")

        leaves: List[int] = []
        for path in paths:
            leaf = node_index(self.overlay.resolve(require_path(path)))
            if leaf not in leaves:
                leaves.append(leaf)

        covered: Set[int] = set(leaves)
        for leaf in leaves:
            while leaf != ROOT_INDEX:
                leaf = parent_index(leaf)
                covered.add(leaf)

        indices: List[int] = list(leaves)
        for node in sorted(covered - {ROOT_INDEX}, reverse=True):
            sibling = sibling_index(node)
            if sibling not in covered and sibling not in indices:
                indices.append(sibling)

        chunks = [self._require_chunk(index) for index in indices]

        log_partial_extract(
            logger,
            path=";".join(format_path(require_path(path)) for path in paths),
            leaf_index=leaves[0],
            proof_size=len(indices),
        )
        return SerializedPartial(indices=indices, chunks=b"".join(chunks))

    def get_bytes(self, path: PathLike) -> bytes:
        """
        Return the bytes of the value at ``path``.

        Raises:
            EmptyPathError: If ``path`` is empty
            InvalidPathError: If ``path`` does not resolve
            ChunkNotLoadedError: If the value's chunk is not cached
        """
        index, begin, end = bytes_at_path(self.overlay, path)
        return self._require_chunk(index)[begin:end]

    def set_bytes(self, path: PathLike, data: bytes) -> None:
        """
        Replace the bytes of the value at ``path``.

        Exactly 32 bytes replace the whole chunk. Anything shorter is spliced
        into ``[begin, end)`` of the existing chunk and the other bytes are
        kept. Ancestors are not recomputed; call ``refresh`` for a new root.

        Raises:
            EmptyPathError: If ``path`` is empty
            InvalidPathError: If ``path`` does not resolve
            ChunkNotLoadedError: If a splice targets a chunk that is not cached
            InvalidChunkError: If a splice does not match the value's size
        """
        data = bytes(data)
        index, begin, end = bytes_at_path(self.overlay, path)

        # 32 bytes always means a whole-chunk write, even for a packed value
        if len(data) == BYTES_PER_CHUNK:
            self._cache.insert(index, data)
            return

        if len(data) != end - begin:
            raise InvalidChunkError(
                f"Expected {end - begin} bytes for index {index}, got {len(data)}"
            )

        chunk = self._require_chunk(index)
        self._cache.insert(index, chunk[:begin] + data + chunk[end:])

    def is_valid(self, root: bytes) -> bool:
        return self._cache.is_valid(root)

    def fill(self) -> int:
        """Insert missing nodes that can be derived from cached children."""
        return self._cache.fill()

    def refresh(self) -> int:
        """Recompute all intermediate nodes and the root from the cached leaves."""
        return self._cache.refresh()

    def root(self) -> Optional[bytes]:
        """Return the cached root, if it has been loaded or calculated."""
        return self._cache.root()

    def to_serialized(self) -> SerializedPartial:
        """Serialize every cached chunk, in ascending index order."""
        return SerializedPartial.from_cache(self._cache)

    def _require_chunk(self, index: int) -> bytes:
        chunk = self._cache.get(index)
        if chunk is None:
            raise ChunkNotLoadedError(index)
        return chunk


def bytes_at_path(overlay: MerkleTreeOverlay, path: PathLike) -> Tuple[int, int, int]:
    """
    Resolve ``path`` to the chunk index and byte range of its value.

    Composite and length nodes cover their whole chunk. For a primitive node
    the final step picks one packed entry: a numeric step matches the entry
    whose offset equals the step value taken as a byte. Only a single-entry
    node, such as a vector element, also accepts a numeric step equal to its
    entry name. A named step matches by entry name.

    Returns:
        Tuple of (chunk index, begin offset, end offset)

    Raises:
        EmptyPathError: If ``path`` is empty
        InvalidPathError: If ``path`` does not resolve or no entry matches
    """
    path = require_path(path)
    node = overlay.resolve(path)

    if isinstance(node, (Composite, Length)):
        return node.index, 0, BYTES_PER_CHUNK

    if isinstance(node, Primitive):
        step = path[-1]
        if isinstance(step, Index):
            for entry in node.entries:
                if entry.offset == step.value & 0xFF:
                    return entry.index, entry.offset, entry.end

            # the overlay already picked the element when it returns a single entry
            if len(node.entries) == 1 and node.entries[0].ident == str(step):
                entry = node.entries[0]
                return entry.index, entry.offset, entry.end

            raise InvalidPathError(step)

        for entry in node.entries:
            if entry.ident == str(step):
                return entry.index, entry.offset, entry.end

        raise InvalidPathError(step)

    raise TypeError(f"Unknown node type: {type(node).__name__}")

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

SSZ-style overlays for basic values, vectors, lists and containers.

Layout rules:
- A basic value on its own takes a whole chunk at offset 0
- A vector of basic values packs ``32 // size`` values per chunk
- A vector of composite values gives each element its own subtree
- A list mixes its length in: data subtree on the left, length chunk on the right
- A container gives each field its own subtree, padded to a power of two
"""

from typing import List, Sequence, Tuple

from merkle_partial.cache import BYTES_PER_CHUNK
from merkle_partial.exceptions import InvalidPathError
from merkle_partial.field import Composite, Length, Node, Primitive, PrimitiveEntry
from merkle_partial.overlay.base import MerkleTreeOverlay
from merkle_partial.path import Ident, Index, Path
from merkle_partial.tree_arithmetic import (
    ceil_log_two,
    first_leaf_index,
    left_child_index,
    right_child_index,
    subtree_index_to_general,
)

LENGTH_IDENT = "len"


class BasicOverlay(MerkleTreeOverlay):
    """Fixed-size basic value (unsigned integer, boolean, 32-byte root)."""

    def __init__(self, size: int, name: str):
        if size <= 0 or BYTES_PER_CHUNK % size != 0:
            raise ValueError(f"Basic value size must divide {BYTES_PER_CHUNK}, got {size}")
        self.size = size
        self.name = name

    def height(self) -> int:
        return 0

    def is_basic(self) -> bool:
        return True

    def node_at(self, path: Path, root: int, ident: str) -> Node:
        if path:
            raise InvalidPathError(path[0])
        return Primitive((PrimitiveEntry(root, ident or self.name, 0, self.size),))

    def __repr__(self) -> str:
        return f"BasicOverlay({self.name})"


uint8 = BasicOverlay(1, "uint8")
uint16 = BasicOverlay(2, "uint16")
uint32 = BasicOverlay(4, "uint32")
uint64 = BasicOverlay(8, "uint64")
uint128 = BasicOverlay(16, "uint128")
uint256 = BasicOverlay(32, "uint256")
boolean = BasicOverlay(1, "bool")
bytes32 = BasicOverlay(32, "bytes32")


class VectorOverlay(MerkleTreeOverlay):
    """Fixed-length sequence of one element type."""

    def __init__(self, element: MerkleTreeOverlay, length: int):
        if length < 1:
            raise ValueError(f"Vector length must be at least 1, got {length}")
        self.element = element
        self.length = length

        if element.is_basic():
            self.per_chunk = BYTES_PER_CHUNK // element.size
            self.chunk_count = -(-length // self.per_chunk)
        else:
            self.per_chunk = 1
            self.chunk_count = length

    def height(self) -> int:
        return ceil_log_two(self.chunk_count)

    def node_at(self, path: Path, root: int, ident: str) -> Node:
        if not path:
            return Composite(root, ident, self.height())

        step = path[0]
        if not isinstance(step, Index) or step.value >= self.length:
            raise InvalidPathError(step)

        first_leaf = first_leaf_index(self.height())

        if self.element.is_basic():
            if len(path) > 1:
                raise InvalidPathError(path[1])
            chunk = step.value // self.per_chunk
            offset = (step.value % self.per_chunk) * self.element.size
            leaf = subtree_index_to_general(root, first_leaf + chunk)
            return Primitive((PrimitiveEntry(leaf, str(step.value), offset, self.element.size),))

        element_root = subtree_index_to_general(root, first_leaf + step.value)
        return self.element.node_at(path[1:], element_root, str(step.value))


class ListOverlay(MerkleTreeOverlay):
    """
    Variable-length sequence with a maximum length.

    The list root is the hash of the data subtree (left child) and the
    length chunk (right child). The length is addressed with ``"len"``.
    """

    def __init__(self, element: MerkleTreeOverlay, max_length: int):
        self.data = VectorOverlay(element, max_length)
        self.max_length = max_length

    def height(self) -> int:
        return self.data.height() + 1

    def node_at(self, path: Path, root: int, ident: str) -> Node:
        if not path:
            return Composite(root, ident, self.height())

        step = path[0]
        if isinstance(step, Ident) and step.name == LENGTH_IDENT:
            if len(path) > 1:
                raise InvalidPathError(path[1])
            return Length(subtree_index_to_general(root, right_child_index(0)), LENGTH_IDENT)

        if isinstance(step, Index):
            data_root = subtree_index_to_general(root, left_child_index(0))
            return self.data.node_at(path, data_root, ident)

        raise InvalidPathError(step)


class ContainerOverlay(MerkleTreeOverlay):
    """
    Ordered set of named fields.

    Example:
        >>> header = ContainerOverlay([
        ...     ("slot", uint64),
        ...     ("proposer_index", uint64),
        ...     ("parent_root", bytes32),
        ...     ("state_root", bytes32),
        ... ])
        >>> header.resolve(["state_root"]).entries[0].index
        6
    """

    def __init__(self, fields: Sequence[Tuple[str, MerkleTreeOverlay]]):
        if not fields:
            raise ValueError("Container requires at least one field")

        names: List[str] = [name for name, _ in fields]
        if len(set(names)) != len(names):
            raise ValueError("Container field names must be unique")

        self.fields = list(fields)
        self._positions = {name: position for position, name in enumerate(names)}

    def height(self) -> int:
        return ceil_log_two(len(self.fields))

    def node_at(self, path: Path, root: int, ident: str) -> Node:
        if not path:
            return Composite(root, ident, self.height())

        step = path[0]
        position = self._positions.get(step.name) if isinstance(step, Ident) else None
        if position is None:
            raise InvalidPathError(step)

        name, overlay = self.fields[position]
        field_root = subtree_index_to_general(root, first_leaf_index(self.height()) + position)
        return overlay.node_at(path[1:], field_root, name)

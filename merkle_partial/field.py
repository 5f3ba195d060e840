"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Node descriptors returned by an overlay.

A resolved path yields exactly one of three node kinds:
- Composite: root of an internal subtree (container, vector, list data)
- Length: the length chunk mixed into a variable-size list root
- Primitive: a leaf chunk packing one or more basic values
"""

from dataclasses import dataclass
from typing import Tuple, Union

from merkle_partial.cache import BYTES_PER_CHUNK


@dataclass(frozen=True)
class Composite:
    """Root of an internal subtree."""
    index: int
    ident: str = ""
    height: int = 0


@dataclass(frozen=True)
class Length:
    """Length chunk of a variable-size list."""
    index: int
    ident: str = ""


@dataclass(frozen=True)
class PrimitiveEntry:
    """
    One basic value packed inside a leaf chunk.

    Attributes:
        index: Tree position of the chunk holding the value
        ident: Name used to match a path step against this value
        offset: Byte offset of the value inside the chunk
        size: Size of the value in bytes
    """
    index: int
    ident: str
    offset: int
    size: int

    @property
    def end(self) -> int:
        return self.offset + self.size


@dataclass(frozen=True)
class Primitive:
    """Leaf chunk holding one or more non-overlapping packed values."""
    entries: Tuple[PrimitiveEntry, ...]

    def __post_init__(self):
        entries = tuple(self.entries)
        object.__setattr__(self, "entries", entries)

        if not entries:
            raise ValueError("Primitive node requires at least one entry")
        if len({entry.index for entry in entries}) != 1:
            raise ValueError("Primitive entries must share a single chunk index")

        for entry in entries:
            if entry.size <= 0 or entry.offset < 0 or entry.end > BYTES_PER_CHUNK:
                raise ValueError(
                    f"Primitive entry {entry.ident!r} does not fit in a "
                    f"{BYTES_PER_CHUNK}-byte chunk"
                )

        ordered = sorted(entries, key=lambda entry: entry.offset)
        for previous, current in zip(ordered, ordered[1:]):
            if current.offset < previous.end:
                raise ValueError(
                    f"Primitive entries {previous.ident!r} and {current.ident!r} overlap"
                )


Node = Union[Composite, Length, Primitive]


def node_index(node: Node) -> int:
    """Return the tree position a node lives at."""
    if isinstance(node, (Composite, Length)):
        return node.index
    if isinstance(node, Primitive):
        return node.entries[0].index
    raise TypeError(f"Unknown node type: {type(node).__name__}")

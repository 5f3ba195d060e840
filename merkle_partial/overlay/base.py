"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Overlay contract mapping structural paths to tree positions.

An overlay knows the shape and packing layout of one data type. It knows
nothing about cached bytes. ``Partial`` consumes it through ``resolve``.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from merkle_partial.exceptions import InvalidPathError
from merkle_partial.field import Composite, Length, Node, Primitive, PrimitiveEntry, node_index
from merkle_partial.path import Path, PathStep, require_path, to_path
from merkle_partial.tree_arithmetic import ROOT_INDEX, depth, subtree_index_to_general


class MerkleTreeOverlay(ABC):
    """
    Abstract base class for type overlays.

    Subclasses describe where each field of a type lives when the type's
    tree is rooted at an arbitrary position, which lets overlays nest.
    """

    def resolve(self, path: Iterable[Union[PathStep, str, int]]) -> Node:
        """
        Resolve ``path`` against this overlay.

        Raises:
            EmptyPathError: If ``path`` has no steps
            InvalidPathError: If a step does not match the type's shape
        """
        return self.node_at(require_path(path), ROOT_INDEX, "")

    @abstractmethod
    def node_at(self, path: Path, root: int, ident: str) -> Node:
        """
        Resolve the remaining ``path`` for a value whose subtree is rooted at ``root``.

        An empty ``path`` addresses the value itself.

        Args:
            path: Remaining steps
            root: Tree position of this value's root
            ident: Name the enclosing type gives this value

        Returns:
            Node descriptor for the addressed field
        """
        pass

    @abstractmethod
    def height(self) -> int:
        """Return the number of levels between this value's root and its leaf chunks."""
        pass

    def is_basic(self) -> bool:
        """Return True for values that pack into a single chunk."""
        return False


class StaticOverlay(MerkleTreeOverlay):
    """
    Overlay backed by an explicit table of paths and nodes.

    Useful for hand-built schemas. Node positions in the table are relative
    to the overlay's own root, so a static overlay can be nested inside a
    container like any other overlay.

    Example:
        >>> overlay = StaticOverlay({
        ...     ("slot",): Primitive((PrimitiveEntry(1, "slot", 0, 8),)),
        ...     ("root",): Composite(2, "root"),
        ... })
        >>> overlay.resolve(["root"]).index
        2
    """

    def __init__(self, nodes: Mapping[Tuple, Node], height: Optional[int] = None):
        self._nodes: Dict[Path, Node] = {to_path(key): node for key, node in nodes.items()}
        if height is None:
            height = max((depth(node_index(node)) for node in self._nodes.values()), default=0)
        self._height = height

    def height(self) -> int:
        return self._height

    def node_at(self, path: Path, root: int, ident: str) -> Node:
        if not path:
            return Composite(root, ident, self._height)

        node = self._nodes.get(tuple(path))
        if node is None:
            raise InvalidPathError(path[-1])

        if root == ROOT_INDEX:
            return node
        return _translate(node, root)


def _translate(node: Node, root: int) -> Node:
    """Move a node described relative to its own root under ``root``."""
    if isinstance(node, Composite):
        return Composite(subtree_index_to_general(root, node.index), node.ident, node.height)
    if isinstance(node, Length):
        return Length(subtree_index_to_general(root, node.index), node.ident)
    if isinstance(node, Primitive):
        return Primitive(tuple(
            PrimitiveEntry(
                subtree_index_to_general(root, entry.index),
                entry.ident,
                entry.offset,
                entry.size,
            )
            for entry in node.entries
        ))
    raise TypeError(f"Unknown node type: {type(node).__name__}")

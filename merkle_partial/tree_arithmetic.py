"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkle Partial, a product of Garudex Labs

Index arithmetic for a zero-indexed complete binary tree.

The root sits at position 0 and the children of position ``i`` sit at
``2i + 1`` (left) and ``2i + 2`` (right). Generalized indices are the
one-indexed form of the same tree (root at 1, children at ``2g`` and
``2g + 1``).
"""

from typing import Tuple

from merkle_partial.exceptions import TreeIndexError

ROOT_INDEX = 0


def _check_index(index: int) -> None:
    if index < 0:
        raise TreeIndexError(f"Tree index must be non-negative, got {index}")


def sibling_index(index: int) -> int:
    """
    Return the position of the node sharing a parent with ``index``.

    Raises:
        TreeIndexError: If ``index`` is the root or negative
    """
    _check_index(index)
    if index == ROOT_INDEX:
        raise TreeIndexError("Root node has no sibling")

    if index % 2 == 1:
        return index + 1
    return index - 1


def parent_index(index: int) -> int:
    """
    Return the position of the parent of ``index``.

    Raises:
        TreeIndexError: If ``index`` is the root or negative
    """
    _check_index(index)
    if index == ROOT_INDEX:
        raise TreeIndexError("Root node has no parent")

    return (index + 1) // 2 - 1


def left_child_index(index: int) -> int:
    _check_index(index)
    return 2 * index + 1


def right_child_index(index: int) -> int:
    _check_index(index)
    return 2 * index + 2


def children_indices(index: int) -> Tuple[int, int]:
    """Return the ``(left, right)`` child positions of ``index``."""
    _check_index(index)
    return 2 * index + 1, 2 * index + 2


def is_left_child(index: int) -> bool:
    _check_index(index)
    if index == ROOT_INDEX:
        raise TreeIndexError("Root node is neither a left nor a right child")
    return index % 2 == 1


def general_index(index: int) -> int:
    """Convert a zero-indexed position to a generalized (one-indexed) index."""
    _check_index(index)
    return index + 1


def zeroed_index(general: int) -> int:
    """Convert a generalized (one-indexed) index to a zero-indexed position."""
    if general < 1:
        raise TreeIndexError(f"Generalized index must be positive, got {general}")
    return general - 1


def log_base_two(value: int) -> int:
    """Floor of log2 for a positive integer."""
    if value < 1:
        raise TreeIndexError(f"log2 is undefined for {value}")
    return value.bit_length() - 1


def ceil_log_two(value: int) -> int:
    """Ceiling of log2, with 0 for values of 0 or 1."""
    if value <= 1:
        return 0
    return (value - 1).bit_length()


def next_power_of_two(value: int) -> int:
    return 1 << ceil_log_two(value)


def depth(index: int) -> int:
    """Return the depth of ``index`` (the root is depth 0)."""
    return log_base_two(general_index(index))


def first_leaf_index(height: int) -> int:
    """Return the position of the leftmost node ``height`` levels below the root."""
    if height < 0:
        raise TreeIndexError(f"Height must be non-negative, got {height}")
    return (1 << height) - 1


def subtree_index_to_general(root: int, index: int) -> int:
    """
    Map a position inside a subtree onto the enclosing tree.

    ``index`` is a zero-indexed position relative to a subtree whose root sits
    at position ``root`` of the enclosing tree. The result is the zero-indexed
    position of the same node in the enclosing tree.

    Example:
        >>> subtree_index_to_general(2, 1)
        5
    """
    _check_index(root)
    _check_index(index)

    local = general_index(index)
    level = log_base_two(local)
    offset = local - (1 << level)

    return zeroed_index((general_index(root) << level) + offset)

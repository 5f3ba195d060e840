"""
Overlays describing how a data type's fields map onto tree positions.
"""

from merkle_partial.overlay.base import MerkleTreeOverlay, StaticOverlay
from merkle_partial.overlay.ssz import (
    BasicOverlay,
    ContainerOverlay,
    ListOverlay,
    VectorOverlay,
    boolean,
    bytes32,
    uint8,
    uint16,
    uint32,
    uint64,
    uint128,
    uint256,
)

__all__ = [
    "MerkleTreeOverlay",
    "StaticOverlay",
    "BasicOverlay",
    "ContainerOverlay",
    "ListOverlay",
    "VectorOverlay",
    "boolean",
    "bytes32",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uint128",
    "uint256",
]

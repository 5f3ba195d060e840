"""
Pytest configuration and shared fixtures for Merkle Partial tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, Generator, Iterable, List

import pytest

from merkle_partial.cache import ChunkCache
from merkle_partial.field import node_index
from merkle_partial.overlay import (
    ContainerOverlay,
    ListOverlay,
    MerkleTreeOverlay,
    VectorOverlay,
    bytes32,
    uint64,
)
from merkle_partial.partial import Partial



def leaf_indices(overlay: MerkleTreeOverlay, paths: Iterable[List]) -> List[int]:
    """Return the distinct leaf chunk positions addressed by ``paths``."""
    indices: List[int] = []
    for path in paths:
        index = node_index(overlay.resolve(path))
        if index not in indices:
            indices.append(index)
    return indices


def build_full_partial(overlay: MerkleTreeOverlay, leaves: Dict[int, bytes]) -> Partial:
    """
    Create a Partial holding ``leaves`` and every internal node above them.

    Args:
        overlay: Overlay the partial is bound to.
        leaves: Leaf chunks by tree position.

    Returns:
        Refreshed Partial with a computed root.
    """
    partial = Partial(overlay)
    for index, chunk in leaves.items():
        partial.cache.insert(index, chunk)
    partial.refresh()
    return partial


@pytest.fixture
def make_full_partial():
    """
    Factory fixture building fully populated partials.
    
    Usage:
        def test_something(header_overlay, make_full_partial):
            partial = make_full_partial(header_overlay, {3: chunk, 4: chunk, 5: chunk, 6: chunk})
    """
    return build_full_partial


@pytest.fixture
def find_leaves():
    """Factory fixture returning the leaf positions addressed by a list of paths."""
    return leaf_indices


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.
    
    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def pair_overlay() -> ContainerOverlay:
    """Two-field object whose leaves sit at positions 1 and 2."""
    return ContainerOverlay([("a", bytes32), ("b", bytes32)])


@pytest.fixture
def header_overlay() -> ContainerOverlay:
    """Block-header-like container with leaves at positions 3 to 6."""
    return ContainerOverlay([
        ("slot", uint64),
        ("proposer_index", uint64),
        ("parent_root", bytes32),
        ("state_root", bytes32),
    ])


@pytest.fixture
def balances_overlay() -> ContainerOverlay:
    """
    Container with a packed vector of eight uint64 balances.

    Balances 0-3 share the chunk at position 3, balances 4-7 the chunk at 4.
    The ``root`` field sits at position 2.
    """
    return ContainerOverlay([
        ("balances", VectorOverlay(uint64, 8)),
        ("root", bytes32),
    ])


@pytest.fixture
def state_overlay(header_overlay: ContainerOverlay) -> ContainerOverlay:
    """Beacon-state-like container nesting a list and a header."""
    return ContainerOverlay([
        ("slot", uint64),
        ("balances", ListOverlay(uint64, 8)),
        ("latest_header", header_overlay),
        ("genesis_root", bytes32),
    ])


@pytest.fixture
def header_leaves() -> Dict[int, bytes]:
    return {
        3: (7).to_bytes(8, "little") + bytes(24),
        4: (42).to_bytes(8, "little") + bytes(24),
        5: b"\xaa" * 32,
        6: b"\xbb" * 32,
    }


@pytest.fixture
def header_partial(header_overlay: ContainerOverlay, header_leaves: Dict[int, bytes]) -> Partial:
    """Fully populated header partial with a computed root."""
    return build_full_partial(header_overlay, header_leaves)


@pytest.fixture
def balances_partial(balances_overlay: ContainerOverlay) -> Partial:
    """Fully populated balances partial; balance ``i`` holds ``1000 + i``."""
    chunk_low = b"".join((1000 + i).to_bytes(8, "little") for i in range(4))
    chunk_high = b"".join((1000 + i).to_bytes(8, "little") for i in range(4, 8))
    return build_full_partial(balances_overlay, {3: chunk_low, 4: chunk_high, 2: b"\x11" * 32})


@pytest.fixture
def full_cache(header_leaves: Dict[int, bytes]) -> ChunkCache:
    """Cache with four leaves and every internal node."""
    cache = ChunkCache(header_leaves)
    cache.refresh()
    return cache


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

# Register custom profile for Merkle Partial tests
settings.register_profile("merkle_partial", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("merkle_partial-ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("merkle_partial-dev", max_examples=10, verbosity=Verbosity.verbose)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "merkle_partial"))

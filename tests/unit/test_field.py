"""
Unit tests for overlay node descriptors.
"""

import pytest

from merkle_partial.field import Composite, Length, Primitive, PrimitiveEntry, node_index


class TestPrimitiveInvariants:
    """Test that packed entries are checked at construction."""
    
    def test_valid_packed_entries(self):
        node = Primitive((
            PrimitiveEntry(4, "a", 0, 8),
            PrimitiveEntry(4, "b", 8, 8),
            PrimitiveEntry(4, "c", 16, 16),
        ))
        assert len(node.entries) == 3
        assert node.entries[2].end == 32
    
    def test_entries_list_is_frozen_to_tuple(self):
        node = Primitive([PrimitiveEntry(1, "a", 0, 8)])
        assert isinstance(node.entries, tuple)
    
    def test_empty_entries_rejected(self):
        with pytest.raises(ValueError, match="at least one entry"):
            Primitive(())
    
    def test_overlapping_entries_rejected(self):
        with pytest.raises(ValueError, match="overlap"):
            Primitive((
                PrimitiveEntry(1, "a", 0, 8),
                PrimitiveEntry(1, "b", 4, 8),
            ))
    
    def test_entry_past_chunk_end_rejected(self):
        with pytest.raises(ValueError, match="does not fit"):
            Primitive((PrimitiveEntry(1, "a", 28, 8),))
    
    def test_zero_size_rejected(self):
        with pytest.raises(ValueError):
            Primitive((PrimitiveEntry(1, "a", 0, 0),))
    
    def test_entries_must_share_index(self):
        with pytest.raises(ValueError, match="single chunk index"):
            Primitive((
                PrimitiveEntry(1, "a", 0, 8),
                PrimitiveEntry(2, "b", 8, 8),
            ))


class TestNodeIndex:
    """Test node_index across node kinds."""
    
    def test_composite(self):
        assert node_index(Composite(5, "header", 2)) == 5
    
    def test_length(self):
        assert node_index(Length(10, "len")) == 10
    
    def test_primitive(self):
        assert node_index(Primitive((PrimitiveEntry(7, "slot", 0, 8),))) == 7
    
    def test_unknown_node_type(self):
        with pytest.raises(TypeError):
            node_index(object())

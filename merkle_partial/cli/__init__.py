"""
Command-line interface for Merkle Partial.
"""

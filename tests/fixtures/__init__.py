"""
Test fixtures package for distributor tests.

This package provides factory functions for creating test objects:
- common.py: addresses, digests, entries, funded distributors

Usage:
    from fixtures import make_address, make_entries

    def test_something():
        entries = make_entries(token, [(alice, 100), (bob, 101)])
"""

from .common import (
    flip_bit,
    make_address,
    make_digest,
    make_distributor,
    make_entries,
)

__all__ = [
    "flip_bit",
    "make_address",
    "make_digest",
    "make_distributor",
    "make_entries",
]

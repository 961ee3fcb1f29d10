"""
Core cryptographic utilities.

Module 02 provides hashing and byte/hex normalisation helpers.
"""
from .hashing import (
    DIGEST_SIZE,
    ADDRESS_SIZE,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
    quantity_to_hex,
    parse_quantity,
    to_digest,
    to_address,
    address_to_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "ADDRESS_SIZE",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "quantity_to_hex",
    "parse_quantity",
    "to_digest",
    "to_address",
    "address_to_hex",
]

"""
Module 02 - Hashing Utilities
Hashing primitives and byte/hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- keccak-256 hashing for raw bytes
- Sorted-pair hashing used for every internal tree node
- Hex encoding/decoding with 0x prefix
- Normalisation of addresses (20 bytes) and digests (32 bytes)

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- Pair hashing orders the two children byte-lexicographically, so the
  result never depends on which child was "left"
- All operations are deterministic
"""
from __future__ import annotations

from typing import Union

from eth_utils import keccak, to_canonical_address, to_checksum_address


DIGEST_SIZE = 32
ADDRESS_SIZE = 20

BytesLike = Union[bytes, bytearray, str]


def keccak256(data: bytes) -> bytes:
    """
    Compute the keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=bytes(data))


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two child digests in byte-lexicographic order.

    parent = keccak256(min(a, b) + max(a, b))

    Args:
        a: First child digest
        b: Second child digest

    Returns:
        32-byte parent digest
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + bytes(data).hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def quantity_to_hex(value: int) -> str:
    """
    Render a non-negative integer as a minimal 0x hex quantity.

    Leading zero nibbles are kept to a whole byte so the output matches
    the usual big-number toHexString rendering (200 -> "0xc8",
    300 -> "0x012c", 0 -> "0x00").
    """
    if value < 0:
        raise ValueError(f"Quantity must be non-negative, got {value}")
    digits = format(value, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


def parse_quantity(value: Union[int, str]) -> int:
    """
    Parse an integer given as int, decimal string or 0x hex string.

    Raises:
        ValueError: If the value is not an integer representation
    """
    if isinstance(value, bool):
        raise ValueError("Booleans are not valid quantities")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported quantity type: {type(value).__name__}")

    text = value.strip()
    if text.lower().startswith("0x"):
        if len(text) == 2:
            raise ValueError(f"Empty hex quantity: {value!r}")
        return int(text[2:], 16)
    if not text.isdigit():
        raise ValueError(f"Quantity must be a decimal or 0x hex string, got {value!r}")
    return int(text)


def to_digest(value: BytesLike) -> bytes:
    """
    Normalise a 32-byte digest given as bytes or 0x hex.

    Raises:
        ValueError: If the value is not exactly 32 bytes
    """
    raw = from_hex(value) if isinstance(value, str) else bytes(value)
    if len(raw) != DIGEST_SIZE:
        raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(raw)}")
    return raw


def to_address(value: BytesLike) -> bytes:
    """
    Normalise an address given as 20 raw bytes or a hex string.

    Checksum casing is not enforced here; inputs are expected to have been
    validated upstream.

    Raises:
        ValueError: If the value is not a 20-byte address
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(value)}")
        return bytes(value)
    return bytes(to_canonical_address(value))


def address_to_hex(address: bytes) -> str:
    """Render a 20-byte address as an EIP-55 checksummed string."""
    return to_checksum_address(address)


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

"""
Common test fixtures shared by all modules.

Provides factory functions for core data:
- Addresses and digests derived from labels (stable across runs)
- Entry lists
- Funded MerkleDistributor instances
"""

from typing import Optional, Sequence

from core.crypto.hashing import keccak256
from core.schemas.entries import Entry
from distribution.distributor import MerkleDistributor
from distribution.ledger import InMemoryTokenLedger


def make_address(label: str) -> bytes:
    """20-byte address derived from a label."""
    return keccak256(f"address:{label}".encode())[-20:]


def make_digest(label: str) -> bytes:
    """32-byte digest derived from a label."""
    return keccak256(label.encode())


def make_entries(token: bytes, balances: Sequence[tuple[bytes, int]]) -> list[Entry]:
    """Entries for one token from (account, amount) pairs."""
    return [Entry(token=token, account=account, amount=amount) for account, amount in balances]


def make_distributor(
    root: bytes,
    ledger: InMemoryTokenLedger,
    vault: bytes,
    operator: Optional[bytes] = None,
    funding: Optional[dict[bytes, int]] = None,
) -> MerkleDistributor:
    """Distributor at ``vault`` holding ``funding`` per token."""
    for token, amount in (funding or {}).items():
        ledger.set_balance(token, vault, amount)
    return MerkleDistributor(
        merkle_root=root,
        ledger=ledger,
        address=vault,
        operator=operator,
    )


def flip_bit(data: bytes, byte_index: int = 0, bit: int = 0) -> bytes:
    """Copy of ``data`` with one bit inverted."""
    mutable = bytearray(data)
    mutable[byte_index] ^= 1 << bit
    return bytes(mutable)

"""
Module 03 - Balance Tree
Domain binding of the Merkle engine to (account, token, amount) entitlements.

Owner: Protocol/Crypto Engineer
Module ID: M03

Leaf encoding (must match every independent verifier byte for byte):

    leaf = keccak256(account[20] ++ token[20] ++ uint256_be(amount)[32])

This is the solidity-packed encoding of (address, address, uint256).

Ordering:
    Leaves are built in the order entries are given. Passing sort=True orders
    entries by (token, account) first so independent rebuilds of the same
    logical input give the same root. Verification never depends on order.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence, Union

from core.crypto.hashing import BytesLike, keccak256, to_address, to_digest, to_hex
from core.merkle.merkle_tree import MerkleTree, verify_merkle_proof
from core.schemas.entries import UINT256_MAX, Entry
from core.schemas.errors import InvalidAmountException, LeafNotFoundException


logger = logging.getLogger(__name__)

EntryLike = Union[Entry, tuple[BytesLike, BytesLike, int]]


def encode_leaf(account: BytesLike, token: BytesLike, amount: int) -> bytes:
    """
    Compute the leaf digest for one entitlement.

    Pure function: identical inputs always give an identical digest.

    Raises:
        InvalidAmountException: If amount is outside [0, 2**256)
        ValueError: If an address is not 20 bytes
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountException(
            f"Amount must be an integer, got {type(amount).__name__}"
        )
    if amount < 0 or amount > UINT256_MAX:
        raise InvalidAmountException(
            f"Amount {amount} does not fit in uint256",
            details={"amount": str(amount)},
        )
    packed = to_address(account) + to_address(token) + amount.to_bytes(32, "big")
    return keccak256(packed)


def _as_entry(item: EntryLike) -> Entry:
    if isinstance(item, Entry):
        return item
    account, token, amount = item
    return Entry(account=account, token=token, amount=amount)


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Order entries by (token bytes, account bytes)."""
    return sorted(entries, key=lambda e: (e.token, e.account))


class BalanceTree:
    """
    Merkle tree over entitlement entries.

    Tuples are read as (account, token, amount), matching the leaf order.

    Example:
        >>> t, a = "0x" + "11" * 20, "0x" + "22" * 20
        >>> tree = BalanceTree([Entry(token=t, account=a, amount=100)])
        >>> BalanceTree.verify_proof(a, t, 100, tree.proof(a, t, 100), tree.root)
        True
    """

    def __init__(self, entries: Sequence[EntryLike], sort: bool = False) -> None:
        parsed = [_as_entry(e) for e in entries]
        if sort:
            parsed = sort_entries(parsed)
        self._entries: tuple[Entry, ...] = tuple(parsed)

        leaves = [encode_leaf(e.account, e.token, e.amount) for e in self._entries]
        self._tree = MerkleTree(leaves)

        # First position wins when the same triple appears twice
        self._index: dict[bytes, int] = {}
        for i, leaf in enumerate(leaves):
            self._index.setdefault(leaf, i)

        logger.info(
            f"Built balance tree over {len(self._entries)} entries, root {self.hex_root}"
        )

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Entries in leaf order."""
        return self._entries

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    @property
    def root(self) -> bytes:
        return self._tree.root

    @property
    def hex_root(self) -> str:
        return self._tree.hex_root

    def index_of(self, account: BytesLike, token: BytesLike, amount: int) -> int:
        """
        Leaf position of an entitlement.

        Raises:
            LeafNotFoundException: If no leaf matches
        """
        leaf = encode_leaf(account, token, amount)
        try:
            return self._index[leaf]
        except KeyError:
            raise LeafNotFoundException(
                "No leaf for the given account, token and amount",
                details={
                    "account": to_hex(to_address(account)),
                    "token": to_hex(to_address(token)),
                    "amount": str(amount),
                },
            ) from None

    def proof(self, account: BytesLike, token: BytesLike, amount: int) -> list[bytes]:
        """Sibling digests proving the entitlement is committed to by the root."""
        return self._tree.proof(self.index_of(account, token, amount))

    def hex_proof(self, account: BytesLike, token: BytesLike, amount: int) -> list[str]:
        return [to_hex(s) for s in self.proof(account, token, amount)]

    @staticmethod
    def verify_proof(
        account: BytesLike,
        token: BytesLike,
        amount: int,
        proof: Sequence[BytesLike],
        root: BytesLike,
    ) -> bool:
        """
        Stateless check that (account, token, amount) is committed to by root.

        Malformed amounts, addresses, digests or proof elements yield False.
        """
        try:
            leaf = encode_leaf(account, token, amount)
            siblings = [to_digest(p) for p in proof]
            root_bytes = to_digest(root)
        except (InvalidAmountException, ValueError, TypeError) as e:
            logger.debug(f"Rejecting malformed proof input: {e}")
            return False
        return verify_merkle_proof(leaf, siblings, root_bytes)


__all__ = [
    "BalanceTree",
    "EntryLike",
    "encode_leaf",
    "sort_entries",
]

"""
Module 05 - Merkle Distributor (Redemption State Machine)

Pays out committed entitlements against the currently published root.

claim(caller, token, cumulative_amount, proof):
1. Verify leaf(caller, token, cumulative_amount) + proof against the root
2. payable = cumulative_amount - claimed[caller][token]
   (negative -> ExcessiveClaimException, zero -> NothingToClaimException)
3. Transfer payable; on failure raise TransferFailedException with the
   counter untouched
4. Set claimed[caller][token] = cumulative_amount
5. Emit Claimed(caller, token, cumulative_amount)

Because the counter is cumulative, the operator can replace the root with a
larger commitment and later claims only pay the delta.

Concurrency:
- Each (account, token) key has its own lock; steps 1-4 run under it, so a
  second claim for the same key cannot start until the counter is written
- The counter only ever holds committed values; readers never see the
  amount of a claim whose transfer is still in flight
- The root is read once per claim, under the root lock, and that snapshot
  is the one verified; a concurrent update_merkle_root cannot tear a claim
- Claims for different keys proceed in parallel
- Key locks are held weakly and disappear once no claim is using them
"""

from __future__ import annotations

import logging
import threading
import weakref
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from core.crypto.hashing import (
    DIGEST_SIZE,
    BytesLike,
    address_to_hex,
    to_address,
    to_digest,
    to_hex,
)
from core.merkle.balance_tree import BalanceTree
from core.schemas.errors import (
    ExcessiveClaimException,
    InvalidProofException,
    NothingToClaimException,
    TransferFailedException,
    UnauthorizedException,
)
from distribution.claims import ClaimStore, InMemoryClaimStore
from distribution.ledger import TokenLedger


logger = logging.getLogger(__name__)

ZERO_ROOT = bytes(DIGEST_SIZE)


class ClaimedEvent(BaseModel):
    """Notification emitted for every successful claim."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    account: bytes = Field(..., description="Claiming account (20 bytes)")
    token: bytes = Field(..., description="Token paid out (20 bytes)")
    cumulative_amount: int = Field(..., description="Counter value after the claim")
    paid: int = Field(..., description="Units transferred by this claim")
    merkle_root: bytes = Field(..., description="Root the proof was verified against")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, str]:
        return {
            "account": address_to_hex(self.account),
            "token": address_to_hex(self.token),
            "cumulative_amount": str(self.cumulative_amount),
            "paid": str(self.paid),
            "merkle_root": to_hex(self.merkle_root),
        }


ClaimListener = Callable[[ClaimedEvent], None]


class MerkleDistributor:
    """
    Redemption state machine for a published Merkle root.

    Example:
        >>> from distribution.aggregator import aggregate
        >>> from distribution.ledger import InMemoryTokenLedger
        >>> token, alice, vault = "0x" + "11" * 20, "0x" + "22" * 20, "0x" + "33" * 20
        >>> record = aggregate([{"token": token, "account": alice, "amount": "100"}])
        >>> ledger = InMemoryTokenLedger()
        >>> ledger.mint(token, vault, 100)
        >>> distributor = MerkleDistributor(record.merkle_root, ledger, address=vault)
        >>> event = distributor.claim(alice, token, 100, [])
        >>> distributor.get_claimed(alice, token)
        100
    """

    def __init__(
        self,
        merkle_root: BytesLike,
        ledger: TokenLedger,
        address: BytesLike,
        operator: Optional[BytesLike] = None,
        claims: Optional[ClaimStore] = None,
    ) -> None:
        self._root = to_digest(merkle_root)
        self._ledger = ledger
        self._address = to_address(address)
        self._operator = to_address(operator) if operator is not None else None
        self._claims = claims or InMemoryClaimStore()

        self._root_lock = threading.Lock()
        self._key_locks: weakref.WeakValueDictionary[tuple[bytes, bytes], threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._key_locks_guard = threading.Lock()

        self._listeners: list[ClaimListener] = []
        self._events: list[ClaimedEvent] = []
        self._events_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def address(self) -> bytes:
        return self._address

    @property
    def operator(self) -> Optional[bytes]:
        return self._operator

    @property
    def merkle_root(self) -> bytes:
        with self._root_lock:
            return self._root

    @property
    def hex_merkle_root(self) -> str:
        return to_hex(self.merkle_root)

    @property
    def events(self) -> list[ClaimedEvent]:
        with self._events_lock:
            return list(self._events)

    def get_claimed(self, account: BytesLike, token: BytesLike) -> int:
        return self._claims.get(to_address(account), to_address(token))

    # ------------------------------------------------------------------
    # Operator
    # ------------------------------------------------------------------

    def ensure_operator(self, caller: BytesLike) -> bytes:
        """
        Check that caller is the configured operator.

        Raises:
            UnauthorizedException: If no operator is configured or caller differs
        """
        caller_bytes = to_address(caller)
        if self._operator is None or caller_bytes != self._operator:
            logger.warning(f"Rejected operator call from {address_to_hex(caller_bytes)}")
            raise UnauthorizedException()
        return caller_bytes

    def update_merkle_root(self, caller: BytesLike, new_root: BytesLike) -> None:
        """
        Publish a new root.

        Raises:
            UnauthorizedException: If caller is not the operator
            ValueError: If new_root is not 32 bytes
        """
        self.ensure_operator(caller)
        root = to_digest(new_root)
        with self._root_lock:
            previous = self._root
            self._root = root
        logger.info(f"Merkle root updated: {to_hex(previous)} -> {to_hex(root)}")

    def subscribe(self, listener: ClaimListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Claim
    # ------------------------------------------------------------------

    def _lock_for(self, key: tuple[bytes, bytes]) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def claim(
        self,
        caller: BytesLike,
        token: BytesLike,
        cumulative_amount: int,
        proof: Sequence[BytesLike],
    ) -> ClaimedEvent:
        """
        Redeem the unpaid part of a committed cumulative entitlement.

        Args:
            caller: Authenticated identity of the claimant
            token: Token being claimed
            cumulative_amount: Total entitlement to date, as committed in the tree
            proof: Sibling digests (bytes or 0x hex)

        Returns:
            The emitted ClaimedEvent

        Raises:
            InvalidProofException: If the proof does not match the published root
            ExcessiveClaimException: If cumulative_amount is below what was paid
            NothingToClaimException: If nothing remains to pay
            TransferFailedException: If the ledger transfer fails (state unchanged)
        """
        account = to_address(caller)
        token_bytes = to_address(token)

        key = (account, token_bytes)
        with self._lock_for(key):
            root = self.merkle_root
            if not BalanceTree.verify_proof(account, token_bytes, cumulative_amount, proof, root):
                logger.warning(
                    f"Invalid proof from {address_to_hex(account)} "
                    f"for {address_to_hex(token_bytes)} amount {cumulative_amount}"
                )
                raise InvalidProofException()

            already_claimed = self._claims.get(account, token_bytes)
            if cumulative_amount < already_claimed:
                raise ExcessiveClaimException(
                    f"Cumulative amount {cumulative_amount} is below "
                    f"already claimed {already_claimed}",
                    cumulative_amount=cumulative_amount,
                    claimed=already_claimed,
                )

            payable = cumulative_amount - already_claimed
            if payable == 0:
                raise NothingToClaimException()

            try:
                self._ledger.transfer(token_bytes, self._address, account, payable)
            except Exception as e:
                logger.warning(
                    f"Transfer of {payable} to {address_to_hex(account)} failed, "
                    f"counter left at {already_claimed}: {e}"
                )
                raise TransferFailedException(
                    f"Transfer failed: {e}",
                    details={
                        "account": address_to_hex(account),
                        "token": address_to_hex(token_bytes),
                        "payable": str(payable),
                    },
                ) from e
            self._claims.set(account, token_bytes, cumulative_amount)

            event = ClaimedEvent(
                account=account,
                token=token_bytes,
                cumulative_amount=cumulative_amount,
                paid=payable,
                merkle_root=root,
            )
            with self._events_lock:
                self._events.append(event)

        logger.info(
            f"Claimed: {address_to_hex(account)} {address_to_hex(token_bytes)} "
            f"cumulative={cumulative_amount} paid={payable}"
        )
        self._notify(event)
        return event

    def _notify(self, event: ClaimedEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # The claim is already committed; a listener cannot undo it
                logger.exception(f"Claim listener {listener!r} failed")


__all__ = ["ClaimedEvent", "ClaimListener", "MerkleDistributor", "ZERO_ROOT"]

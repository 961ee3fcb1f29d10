"""
Module 05 - Token Ledger

The value-transfer collaborator of the redemption state machine. A ledger
moves units of a token between holders; the distributor only needs
``balance_of`` and ``transfer``.

InMemoryTokenLedger is a thread-safe in-process implementation used by the
HTTP service and tests.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod

from core.crypto.hashing import BytesLike, address_to_hex, to_address
from core.schemas.errors import InsufficientBalanceException


logger = logging.getLogger(__name__)


class TokenLedger(ABC):
    """Abstract token ledger."""

    @abstractmethod
    def balance_of(self, token: BytesLike, holder: BytesLike) -> int:
        """Units of ``token`` held by ``holder``."""

    @abstractmethod
    def transfer(
        self,
        token: BytesLike,
        sender: BytesLike,
        recipient: BytesLike,
        amount: int,
    ) -> None:
        """
        Move ``amount`` units of ``token`` from sender to recipient.

        Must either complete fully or raise without changing balances.
        """


class InMemoryTokenLedger(TokenLedger):
    """Balances held in a dict keyed by (token, holder)."""

    def __init__(self) -> None:
        self._balances: dict[tuple[bytes, bytes], int] = {}
        self._lock = threading.Lock()

    def balance_of(self, token: BytesLike, holder: BytesLike) -> int:
        with self._lock:
            return self._balances.get((to_address(token), to_address(holder)), 0)

    def set_balance(self, token: BytesLike, holder: BytesLike, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Balance must be non-negative, got {amount}")
        with self._lock:
            self._balances[(to_address(token), to_address(holder))] = amount

    def mint(self, token: BytesLike, holder: BytesLike, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative, got {amount}")
        key = (to_address(token), to_address(holder))
        with self._lock:
            self._balances[key] = self._balances.get(key, 0) + amount

    def transfer(
        self,
        token: BytesLike,
        sender: BytesLike,
        recipient: BytesLike,
        amount: int,
    ) -> None:
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative, got {amount}")
        token_bytes = to_address(token)
        from_key = (token_bytes, to_address(sender))
        to_key = (token_bytes, to_address(recipient))

        with self._lock:
            available = self._balances.get(from_key, 0)
            if available < amount:
                raise InsufficientBalanceException(
                    details={
                        "token": address_to_hex(token_bytes),
                        "sender": address_to_hex(from_key[1]),
                        "available": str(available),
                        "requested": str(amount),
                    },
                )
            self._balances[from_key] = available - amount
            self._balances[to_key] = self._balances.get(to_key, 0) + amount

        logger.debug(
            f"Transferred {amount} of {address_to_hex(token_bytes)} "
            f"to {address_to_hex(to_key[1])}"
        )


__all__ = ["TokenLedger", "InMemoryTokenLedger"]

"""
Module 05 - Claimed Counter Store

One unsigned counter per (account, token): the cumulative amount already
paid out. Counters start at zero and are only ever written by the
distributor, under its per-key lock.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod


class ClaimStore(ABC):
    """Persisted claimed counters."""

    @abstractmethod
    def get(self, account: bytes, token: bytes) -> int:
        """Cumulative amount claimed so far (0 if never claimed)."""

    @abstractmethod
    def set(self, account: bytes, token: bytes, value: int) -> None:
        """Overwrite the counter for (account, token)."""


class InMemoryClaimStore(ClaimStore):
    """Dict-backed store for a single process."""

    def __init__(self) -> None:
        self._claimed: dict[tuple[bytes, bytes], int] = {}
        self._lock = threading.Lock()

    def get(self, account: bytes, token: bytes) -> int:
        with self._lock:
            return self._claimed.get((account, token), 0)

    def set(self, account: bytes, token: bytes, value: int) -> None:
        if value < 0:
            raise ValueError(f"Claimed counter must be non-negative, got {value}")
        with self._lock:
            self._claimed[(account, token)] = value

    def snapshot(self) -> dict[tuple[bytes, bytes], int]:
        with self._lock:
            return dict(self._claimed)


__all__ = ["ClaimStore", "InMemoryClaimStore"]

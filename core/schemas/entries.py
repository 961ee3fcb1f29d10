"""
Module 01 - Schemas
File: entries.py

Purpose: Input entitlement entries fed to the balance tree and aggregator.
Addresses are held as canonical 20-byte values and amounts as Python ints;
string inputs (hex addresses, decimal or 0x hex amounts) are parsed on
construction.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import address_to_hex, parse_quantity, quantity_to_hex, to_address


UINT256_MAX = 2**256 - 1


class Entry(BaseModel):
    """
    One (token, account, amount) entitlement.

    Amount range is not enforced here; the aggregator and leaf encoder
    reject zero and out-of-range amounts with typed errors.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    token: bytes = Field(
        ...,
        description="Token address (20 bytes)",
    )
    account: bytes = Field(
        ...,
        description="Recipient address (20 bytes)",
    )
    amount: int = Field(
        ...,
        description="Entitled amount in base units",
    )

    @field_validator("token", "account", mode="before")
    @classmethod
    def _normalize_address(cls, value: Any) -> bytes:
        return to_address(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> int:
        return parse_quantity(value)

    @property
    def key(self) -> tuple[bytes, bytes]:
        """(token, account) pair identifying the entitlement."""
        return (self.token, self.account)

    def to_export(self) -> dict[str, str]:
        return {
            "token": address_to_hex(self.token),
            "account": address_to_hex(self.account),
            "amount": quantity_to_hex(self.amount),
        }


__all__ = ["Entry", "UINT256_MAX"]

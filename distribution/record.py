"""
Module 04 - Distribution Record

The publishable artifact produced by the aggregator. It is sufficient on its
own to recreate the whole tree: anyone can check that every claim is included
under the root and that the root commits to nothing else.

Export format:
    {
      "merkleRoot": "0x<64 hex>",
      "tokens": {
        "<token>": {
          "tokenTotal": "0x<hex>",
          "claims": {
            "<account>": {"earnings": "0x<hex>", "proof": ["0x<64 hex>", ...]}
          }
        }
      }
    }
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import (
    BytesLike,
    address_to_hex,
    parse_quantity,
    quantity_to_hex,
    to_address,
    to_digest,
    to_hex,
)
from core.merkle.balance_tree import BalanceTree
from core.schemas.errors import LeafNotFoundException


class ClaimInfo(BaseModel):
    """Amount owed to one account for one token, with its inclusion proof."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: int = Field(..., ge=0, description="Cumulative entitlement")
    proof: tuple[bytes, ...] = Field(
        default=(),
        description="Sibling digests from leaf to root",
    )

    @property
    def hex_proof(self) -> list[str]:
        return [to_hex(p) for p in self.proof]


class TokenDistribution(BaseModel):
    """All claims for a single token."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    token_total: int = Field(..., ge=0, description="Sum of all claim amounts")
    claims: Mapping[bytes, ClaimInfo] = Field(
        default_factory=dict,
        validate_default=True,
        description="Claims keyed by 20-byte account address",
    )

    @field_validator("claims", mode="after")
    @classmethod
    def _freeze_claims(cls, value: Mapping[bytes, ClaimInfo]) -> Mapping[bytes, ClaimInfo]:
        return MappingProxyType(dict(value))


class DistributionRecord(BaseModel):
    """
    Root plus per-token claim tables.

    Built once per input batch by ``distribution.aggregator.aggregate``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    merkle_root: bytes = Field(..., description="32-byte Merkle root")
    tokens: Mapping[bytes, TokenDistribution] = Field(
        default_factory=dict,
        validate_default=True,
        description="Per-token distributions keyed by 20-byte token address",
    )

    @field_validator("tokens", mode="after")
    @classmethod
    def _freeze_tokens(
        cls, value: Mapping[bytes, TokenDistribution]
    ) -> Mapping[bytes, TokenDistribution]:
        return MappingProxyType(dict(value))

    @property
    def hex_root(self) -> str:
        return to_hex(self.merkle_root)

    @property
    def claim_count(self) -> int:
        return sum(len(t.claims) for t in self.tokens.values())

    def claim_for(self, account: BytesLike, token: BytesLike) -> ClaimInfo:
        """
        Look up what an account is owed of a token.

        Raises:
            LeafNotFoundException: If the record has no such claim
        """
        account_bytes = to_address(account)
        token_bytes = to_address(token)
        distribution = self.tokens.get(token_bytes)
        claim = distribution.claims.get(account_bytes) if distribution else None
        if claim is None:
            raise LeafNotFoundException(
                "No claim for account and token in this distribution",
                details={
                    "account": address_to_hex(account_bytes),
                    "token": address_to_hex(token_bytes),
                },
            )
        return claim

    def verify_all(self) -> bool:
        """Re-check every claim's proof against the record's root."""
        for token, distribution in self.tokens.items():
            for account, claim in distribution.claims.items():
                if not BalanceTree.verify_proof(
                    account, token, claim.amount, claim.proof, self.merkle_root
                ):
                    return False
        return True

    def to_export(self) -> dict[str, Any]:
        """Render the record in its portable hex/JSON-ready form."""
        return {
            "merkleRoot": self.hex_root,
            "tokens": {
                address_to_hex(token): {
                    "tokenTotal": quantity_to_hex(distribution.token_total),
                    "claims": {
                        address_to_hex(account): {
                            "earnings": quantity_to_hex(claim.amount),
                            "proof": claim.hex_proof,
                        }
                        for account, claim in distribution.claims.items()
                    },
                }
                for token, distribution in self.tokens.items()
            },
        }

    @classmethod
    def from_export(cls, data: dict[str, Any]) -> "DistributionRecord":
        """
        Parse a record previously rendered by ``to_export``.

        Raises:
            ValueError: If any root, address, quantity or proof is malformed
        """
        tokens: dict[bytes, TokenDistribution] = {}
        for token_hex, token_data in data.get("tokens", {}).items():
            claims = {
                to_address(account_hex): ClaimInfo(
                    amount=parse_quantity(claim_data["earnings"]),
                    proof=tuple(to_digest(p) for p in claim_data.get("proof", [])),
                )
                for account_hex, claim_data in token_data.get("claims", {}).items()
            }
            tokens[to_address(token_hex)] = TokenDistribution(
                token_total=parse_quantity(token_data["tokenTotal"]),
                claims=claims,
            )
        return cls(merkle_root=to_digest(data["merkleRoot"]), tokens=tokens)


__all__ = ["ClaimInfo", "TokenDistribution", "DistributionRecord"]

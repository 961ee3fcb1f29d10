"""
Module 09D - API Request Models

Pydantic models for API request validation.
Addresses and digests are 0x hex strings; amounts are decimal or 0x hex strings.
"""

from pydantic import BaseModel, Field


class EntryInput(BaseModel):
    """One raw entitlement entry."""

    token: str = Field(..., description="Token address (0x-prefixed)")
    account: str = Field(..., description="Recipient address (0x-prefixed)")
    amount: str = Field(..., description="Amount as decimal or 0x hex string")


class DistributionRequest(BaseModel):
    """Request body for POST /distributions endpoint."""

    entries: list[EntryInput] = Field(
        ...,
        min_length=1,
        description="Entries to commit to, in presentation order",
    )
    duplicate_policy: str | None = Field(
        default=None,
        pattern="^(reject|merge)$",
        description="Override the configured duplicate policy",
    )
    sort_entries: bool | None = Field(
        default=None,
        description="Override the configured ordering policy",
    )


class VerifyProofRequest(BaseModel):
    """Request body for POST /proofs/verify endpoint."""

    account: str = Field(..., description="Claimant address")
    token: str = Field(..., description="Token address")
    amount: str = Field(..., description="Cumulative amount as decimal or 0x hex")
    proof: list[str] = Field(default_factory=list, description="Sibling digests (0x hex)")
    root: str = Field(..., description="Merkle root (0x hex)")


class ClaimRequest(BaseModel):
    """Request body for POST /claims endpoint. The caller comes from X-Caller."""

    token: str = Field(..., description="Token address")
    cumulative_amount: str = Field(..., description="Cumulative amount as decimal or 0x hex")
    proof: list[str] = Field(default_factory=list, description="Sibling digests (0x hex)")


class UpdateRootRequest(BaseModel):
    """Request body for PUT /merkle-root endpoint."""

    merkle_root: str = Field(
        ...,
        pattern="^0x[0-9a-fA-F]{64}$",
        description="New Merkle root (0x + 64 hex chars)",
    )


class MintRequest(BaseModel):
    """Request body for POST /ledger/mint endpoint. The caller comes from X-Caller."""

    token: str = Field(..., description="Token address")
    amount: str = Field(..., description="Amount as decimal or 0x hex string")
    holder: str | None = Field(
        default=None,
        description="Recipient address; defaults to the distributor address",
    )

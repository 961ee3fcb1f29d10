"""
Module 09D - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-distributor-api"
    version: str = "v1"
    merkle_root: str | None = Field(default=None, description="Currently published root (0x hex)")
    operator_configured: bool = Field(default=False, description="Whether root updates and funding are enabled")


class DistributionResponse(BaseModel):
    """Response for POST /distributions endpoint."""

    ok: bool = True
    merkleRoot: str = Field(..., description="Merkle root (0x hex)")
    tokens: dict[str, Any] = Field(
        default_factory=dict,
        description="Per-token totals and claims with proofs",
    )


class VerifyProofResponse(BaseModel):
    """Response for POST /proofs/verify endpoint."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof recomputes the root")


class MerkleRootResponse(BaseModel):
    """Response for GET/PUT /merkle-root endpoints."""

    ok: bool = True
    merkle_root: str = Field(..., description="Currently published root (0x hex)")


class ClaimResponse(BaseModel):
    """Response for POST /claims endpoint."""

    ok: bool = True
    account: str = Field(..., description="Claiming account")
    token: str = Field(..., description="Token paid out")
    cumulative_amount: str = Field(..., description="Counter value after the claim")
    paid: str = Field(..., description="Units transferred by this claim")
    merkle_root: str = Field(..., description="Root the proof was verified against")


class ClaimedResponse(BaseModel):
    """Response for GET /claimed/{account}/{token} endpoint."""

    ok: bool = True
    account: str
    token: str
    claimed: str = Field(..., description="Cumulative amount already paid (decimal)")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")


class BalanceResponse(BaseModel):
    """Response for POST /ledger/mint and GET /balances/{token}/{holder}."""

    ok: bool = True
    token: str
    holder: str
    balance: str = Field(..., description="Ledger balance (decimal)")

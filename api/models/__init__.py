"""API request and response models."""

from api.models.requests import (
    ClaimRequest,
    DistributionRequest,
    EntryInput,
    MintRequest,
    UpdateRootRequest,
    VerifyProofRequest,
)
from api.models.responses import (
    BalanceResponse,
    ClaimedResponse,
    ClaimResponse,
    DistributionResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    MerkleRootResponse,
    VerifyProofResponse,
)

__all__ = [
    "ClaimRequest",
    "DistributionRequest",
    "EntryInput",
    "MintRequest",
    "UpdateRootRequest",
    "VerifyProofRequest",
    "BalanceResponse",
    "ClaimedResponse",
    "ClaimResponse",
    "DistributionResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "MerkleRootResponse",
    "VerifyProofResponse",
]

"""
Module 09D - Health Check Route

Liveness endpoint that also reports the published root, so monitors can tell
whether an operator has published a distribution yet.
"""

from fastapi import APIRouter, Depends

from api.deps import get_distributor
from api.models.responses import HealthResponse
from distribution.distributor import MerkleDistributor


router = APIRouter(tags=["health"])


def _status(distributor: MerkleDistributor) -> HealthResponse:
    return HealthResponse(
        ok=True,
        service="merkle-distributor-api",
        version="v1",
        merkle_root=distributor.hex_merkle_root,
        operator_configured=distributor.operator is not None,
    )


@router.get("/health", response_model=HealthResponse)
def health_check(
    distributor: MerkleDistributor = Depends(get_distributor),
) -> HealthResponse:
    """Service status plus the currently published root."""
    return _status(distributor)


@router.get("/", response_model=HealthResponse)
def root(
    distributor: MerkleDistributor = Depends(get_distributor),
) -> HealthResponse:
    """Root endpoint - same as health check."""
    return _status(distributor)

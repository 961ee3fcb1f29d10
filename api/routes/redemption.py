"""
Module 09D - Redemption Routes

HTTP rendering of the distributor boundary:
- GET  /merkle-root
- PUT  /merkle-root                 (operator only)
- POST /claims
- GET  /claimed/{account}/{token}

The caller is taken from the X-Caller header, which the fronting
transport/auth layer is responsible for setting.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_caller, get_distributor
from api.errors import InvalidRequestError
from api.models.requests import ClaimRequest, UpdateRootRequest
from api.models.responses import ClaimedResponse, ClaimResponse, MerkleRootResponse
from core.crypto.hashing import address_to_hex, parse_quantity, to_address
from distribution.distributor import MerkleDistributor


logger = logging.getLogger(__name__)

router = APIRouter(tags=["redemption"])


@router.get("/merkle-root", response_model=MerkleRootResponse)
def get_merkle_root(
    distributor: MerkleDistributor = Depends(get_distributor),
) -> MerkleRootResponse:
    return MerkleRootResponse(ok=True, merkle_root=distributor.hex_merkle_root)


@router.put("/merkle-root", response_model=MerkleRootResponse)
def update_merkle_root(
    request: UpdateRootRequest,
    caller: bytes = Depends(get_caller),
    distributor: MerkleDistributor = Depends(get_distributor),
) -> MerkleRootResponse:
    distributor.update_merkle_root(caller, request.merkle_root)
    return MerkleRootResponse(ok=True, merkle_root=distributor.hex_merkle_root)


@router.post("/claims", response_model=ClaimResponse)
def claim(
    request: ClaimRequest,
    caller: bytes = Depends(get_caller),
    distributor: MerkleDistributor = Depends(get_distributor),
) -> ClaimResponse:
    """Redeem the unpaid part of the caller's committed entitlement."""
    try:
        cumulative_amount = parse_quantity(request.cumulative_amount)
        token = to_address(request.token)
    except (ValueError, TypeError) as e:
        raise InvalidRequestError(f"Invalid claim: {e}") from e

    event = distributor.claim(caller, token, cumulative_amount, request.proof)
    return ClaimResponse(ok=True, **event.to_dict())


@router.get("/claimed/{account}/{token}", response_model=ClaimedResponse)
def get_claimed(
    account: str,
    token: str,
    distributor: MerkleDistributor = Depends(get_distributor),
) -> ClaimedResponse:
    try:
        account_bytes = to_address(account)
        token_bytes = to_address(token)
    except (ValueError, TypeError) as e:
        raise InvalidRequestError(f"Invalid address: {e}") from e

    claimed = distributor.get_claimed(account_bytes, token_bytes)
    return ClaimedResponse(
        ok=True,
        account=address_to_hex(account_bytes),
        token=address_to_hex(token_bytes),
        claimed=str(claimed),
    )

"""
Module 09D - Proof Verification Route

Stateless proof verification: no tree or published root involved.
"""

from fastapi import APIRouter

from api.errors import InvalidRequestError
from api.models.requests import VerifyProofRequest
from api.models.responses import VerifyProofResponse
from core.crypto.hashing import parse_quantity
from core.merkle.balance_tree import BalanceTree


router = APIRouter(tags=["proofs"])


@router.post("/proofs/verify", response_model=VerifyProofResponse)
def verify_proof(request: VerifyProofRequest) -> VerifyProofResponse:
    """Check that (account, token, amount) is committed to by the given root."""
    try:
        amount = parse_quantity(request.amount)
    except ValueError as e:
        raise InvalidRequestError(f"Invalid amount: {e}") from e

    valid = BalanceTree.verify_proof(
        request.account,
        request.token,
        amount,
        request.proof,
        request.root,
    )
    return VerifyProofResponse(ok=True, valid=valid)

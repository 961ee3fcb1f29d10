"""
Module 09D - Ledger Routes

Funding surface for the in-process token ledger:
- POST /ledger/mint                (operator only)
- GET  /balances/{token}/{holder}

Minting defaults to the distributor address so published claims can be paid.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_caller, get_distributor, get_ledger
from api.errors import InvalidRequestError
from api.models.requests import MintRequest
from api.models.responses import BalanceResponse
from core.crypto.hashing import address_to_hex, parse_quantity, to_address
from distribution.distributor import MerkleDistributor
from distribution.ledger import InMemoryTokenLedger


logger = logging.getLogger(__name__)

router = APIRouter(tags=["ledger"])


@router.post("/ledger/mint", response_model=BalanceResponse)
def mint(
    request: MintRequest,
    caller: bytes = Depends(get_caller),
    ledger: InMemoryTokenLedger = Depends(get_ledger),
    distributor: MerkleDistributor = Depends(get_distributor),
) -> BalanceResponse:
    """Credit tokens to a holder (the distributor unless one is given)."""
    distributor.ensure_operator(caller)

    try:
        token = to_address(request.token)
        holder = to_address(request.holder) if request.holder else distributor.address
        amount = parse_quantity(request.amount)
    except (ValueError, TypeError) as e:
        raise InvalidRequestError(f"Invalid mint: {e}") from e
    if amount <= 0:
        raise InvalidRequestError(f"Mint amount must be positive, got {amount}")

    ledger.mint(token, holder, amount)
    balance = ledger.balance_of(token, holder)
    logger.info(f"Minted {amount} of {address_to_hex(token)} to {address_to_hex(holder)}")

    return BalanceResponse(
        ok=True,
        token=address_to_hex(token),
        holder=address_to_hex(holder),
        balance=str(balance),
    )


@router.get("/balances/{token}/{holder}", response_model=BalanceResponse)
def get_balance(
    token: str,
    holder: str,
    ledger: InMemoryTokenLedger = Depends(get_ledger),
) -> BalanceResponse:
    try:
        token_bytes = to_address(token)
        holder_bytes = to_address(holder)
    except (ValueError, TypeError) as e:
        raise InvalidRequestError(f"Invalid address: {e}") from e

    return BalanceResponse(
        ok=True,
        token=address_to_hex(token_bytes),
        holder=address_to_hex(holder_bytes),
        balance=str(ledger.balance_of(token_bytes, holder_bytes)),
    )

"""
Module 09D - Distributions Route

Build a distribution record from raw entries.
"""

from __future__ import annotations

import dataclasses
import logging

from fastapi import APIRouter, Depends

from api.deps import get_runtime_config
from api.errors import InvalidRequestError
from api.models.requests import DistributionRequest
from api.models.responses import DistributionResponse
from core.config.runtime import RuntimeConfig
from core.schemas.entries import Entry
from distribution.aggregator import aggregate


logger = logging.getLogger(__name__)

router = APIRouter(tags=["distributions"])


@router.post("/distributions", response_model=DistributionResponse)
def create_distribution(
    request: DistributionRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> DistributionResponse:
    """
    Aggregate entries into a root and per-token claim tables with proofs.

    Request-level duplicate_policy / sort_entries override the configuration.
    """
    overrides = {}
    if request.duplicate_policy is not None:
        overrides["duplicate_policy"] = request.duplicate_policy
    if request.sort_entries is not None:
        overrides["sort_entries"] = request.sort_entries
    aggregation = dataclasses.replace(config.aggregation, **overrides)

    try:
        entries = [
            Entry(token=e.token, account=e.account, amount=e.amount)
            for e in request.entries
        ]
    except ValueError as e:
        raise InvalidRequestError(f"Invalid entry: {e}") from e

    record = aggregate(entries, aggregation)
    logger.info(f"Built distribution {record.hex_root} with {record.claim_count} claims")

    export = record.to_export()
    return DistributionResponse(
        ok=True,
        merkleRoot=export["merkleRoot"],
        tokens=export["tokens"],
    )

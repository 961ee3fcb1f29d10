"""
Module 04 - Distribution Aggregator

Turns a batch of raw entitlement entries into a DistributionRecord:

1. Validate each amount (0 < amount <= 2**256 - 1)
2. Detect repeated (token, account) pairs: reject or merge per config
3. Build one BalanceTree over all entries of all tokens
4. Per token, sum amounts into token_total (overflow fails) and attach
   each account's proof from the shared tree

Errors surface immediately; no partial record is ever returned.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from core.config.runtime import AggregationConfig
from core.crypto.hashing import address_to_hex
from core.merkle.balance_tree import BalanceTree
from core.schemas.entries import UINT256_MAX, Entry
from core.schemas.errors import (
    AmountOverflowException,
    DuplicateClaimException,
    InvalidAmountException,
)
from distribution.record import ClaimInfo, DistributionRecord, TokenDistribution


logger = logging.getLogger(__name__)


def _coerce(item: Union[Entry, dict]) -> Entry:
    if isinstance(item, Entry):
        return item
    return Entry(**item)


def _validate_amount(entry: Entry) -> None:
    if entry.amount <= 0 or entry.amount > UINT256_MAX:
        raise InvalidAmountException(
            f"Invalid amount {entry.amount} for account {address_to_hex(entry.account)} "
            f"for token {address_to_hex(entry.token)}",
            details={
                "token": address_to_hex(entry.token),
                "account": address_to_hex(entry.account),
                "amount": str(entry.amount),
            },
        )


def collect_entries(
    entries: Iterable[Union[Entry, dict]],
    duplicate_policy: str = "reject",
) -> list[Entry]:
    """
    Validate entries and resolve repeated (token, account) pairs.

    With "merge", the merged entry takes the position of the first
    occurrence.

    Raises:
        InvalidAmountException: If an amount is zero or outside uint256
        DuplicateClaimException: On a repeated pair under "reject"
        AmountOverflowException: If a merged amount exceeds uint256
    """
    ordered: dict[tuple[bytes, bytes], Entry] = {}
    for item in entries:
        entry = _coerce(item)
        _validate_amount(entry)

        existing = ordered.get(entry.key)
        if existing is None:
            ordered[entry.key] = entry
            continue

        token_hex = address_to_hex(entry.token)
        account_hex = address_to_hex(entry.account)
        if duplicate_policy != "merge":
            raise DuplicateClaimException(
                f"Duplicate account: {account_hex} for token: {token_hex}",
                token=token_hex,
                account=account_hex,
            )

        merged = existing.amount + entry.amount
        if merged > UINT256_MAX:
            raise AmountOverflowException(
                f"Merged amount for account {account_hex} overflows uint256",
                token=token_hex,
            )
        logger.debug(f"Merging duplicate entry for {account_hex} / {token_hex}")
        ordered[entry.key] = existing.model_copy(update={"amount": merged})

    return list(ordered.values())


def aggregate(
    entries: Iterable[Union[Entry, dict]],
    config: Optional[AggregationConfig] = None,
) -> DistributionRecord:
    """
    Build the publishable distribution for a batch of entries.

    Args:
        entries: Ordered entries (Entry instances or dicts with token,
            account, amount); leaf order follows this order unless
            config.sort_entries is set
        config: Duplicate policy and ordering options

    Returns:
        Immutable DistributionRecord committing to every token at once

    Raises:
        EmptyInputException: If there are no entries
        InvalidAmountException, DuplicateClaimException,
        AmountOverflowException: On invalid input
    """
    config = config or AggregationConfig()
    parsed = collect_entries(entries, config.duplicate_policy)

    tree = BalanceTree(parsed, sort=config.sort_entries)

    totals: dict[bytes, int] = {}
    claims: dict[bytes, dict[bytes, ClaimInfo]] = {}
    for entry in tree.entries:
        total = totals.get(entry.token, 0) + entry.amount
        if total > UINT256_MAX:
            raise AmountOverflowException(
                f"Token total overflows uint256 for token {address_to_hex(entry.token)}",
                token=address_to_hex(entry.token),
            )
        totals[entry.token] = total

        proof = tree.proof(entry.account, entry.token, entry.amount)
        claims.setdefault(entry.token, {})[entry.account] = ClaimInfo(
            amount=entry.amount,
            proof=tuple(proof),
        )

    record = DistributionRecord(
        merkle_root=tree.root,
        tokens={
            token: TokenDistribution(token_total=totals[token], claims=token_claims)
            for token, token_claims in claims.items()
        },
    )

    logger.info(
        f"Aggregated {len(parsed)} entries across {len(record.tokens)} tokens, "
        f"root {record.hex_root}"
    )
    return record


__all__ = ["aggregate", "collect_entries"]

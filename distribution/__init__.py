"""
Modules 04-05 - Distribution and Redemption

Builds publishable distributions from raw entries and redeems claims
against a published root.

Public API:
- aggregate: Entries -> DistributionRecord (root + per-token claim tables)
- DistributionRecord / TokenDistribution / ClaimInfo: The publishable artifact
- MerkleDistributor: Redemption state machine with cumulative claimed counters
- ClaimedEvent: Emitted on every successful claim
- TokenLedger / InMemoryTokenLedger: Value-transfer collaborator
- ClaimStore / InMemoryClaimStore: Claimed counter persistence
"""

from distribution.record import ClaimInfo, DistributionRecord, TokenDistribution
from distribution.aggregator import aggregate, collect_entries
from distribution.claims import ClaimStore, InMemoryClaimStore
from distribution.ledger import InMemoryTokenLedger, TokenLedger
from distribution.distributor import ClaimedEvent, ClaimListener, MerkleDistributor, ZERO_ROOT

__all__ = [
    "aggregate",
    "collect_entries",
    "ClaimInfo",
    "DistributionRecord",
    "TokenDistribution",
    "ClaimStore",
    "InMemoryClaimStore",
    "InMemoryTokenLedger",
    "TokenLedger",
    "ClaimedEvent",
    "ClaimListener",
    "MerkleDistributor",
    "ZERO_ROOT",
]

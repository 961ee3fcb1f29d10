"""API route handlers."""

from api.routes import health, distributions, proofs, redemption, ledger

__all__ = ["health", "distributions", "proofs", "redemption", "ledger"]

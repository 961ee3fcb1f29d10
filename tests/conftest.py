"""
Pytest configuration and shared fixtures for distributor tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures.common import make_address, make_digest  # noqa: E402
from distribution.ledger import InMemoryTokenLedger  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def token():
    """Primary token address."""
    return make_address("token")


@pytest.fixture
def other_token():
    """Second token address."""
    return make_address("other-token")


@pytest.fixture
def alice():
    return make_address("alice")


@pytest.fixture
def bob():
    return make_address("bob")


@pytest.fixture
def carol():
    return make_address("carol")


@pytest.fixture
def vault():
    """Address holding the distributed tokens."""
    return make_address("vault")


@pytest.fixture
def operator():
    """Address allowed to replace the published root."""
    return make_address("operator")


@pytest.fixture
def ledger():
    return InMemoryTokenLedger()


@pytest.fixture
def leaves():
    """Seven distinct leaf digests."""
    return [make_digest(f"leaf{i}") for i in range(7)]

"""
Module 09D - API Dependencies

Dependency injection for the API.
Provides the shared ledger and distributor instances and the caller identity.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from fastapi import Header

from api.errors import InvalidRequestError, MissingCallerError
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import ADDRESS_SIZE, to_address
from distribution.distributor import ZERO_ROOT, MerkleDistributor
from distribution.ledger import InMemoryTokenLedger

logger = logging.getLogger(__name__)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./distributor.json
      2. ./.distributor.json
      3. ~/.config/distributor/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "distributor.json",
        Path.cwd() / ".distributor.json",
        Path.home() / ".config" / "distributor" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {path}")
                config = RuntimeConfig.from_dict(data)
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


@lru_cache(maxsize=1)
def get_runtime_config() -> RuntimeConfig:
    return _load_runtime_config()


@lru_cache(maxsize=1)
def get_ledger() -> InMemoryTokenLedger:
    """Process-wide token ledger."""
    return InMemoryTokenLedger()


@lru_cache(maxsize=1)
def get_distributor() -> MerkleDistributor:
    """
    Process-wide distributor built from configuration.

    Without a configured root the zero root is published, which no proof
    verifies against until the operator replaces it.
    """
    redemption = get_runtime_config().redemption

    address = redemption.distributor_address
    if address is None:
        logger.warning("No distributor address configured, using the zero address")
        address = bytes(ADDRESS_SIZE)

    return MerkleDistributor(
        merkle_root=redemption.initial_root or ZERO_ROOT,
        ledger=get_ledger(),
        address=address,
        operator=redemption.operator,
    )


def get_caller(x_caller: str | None = Header(default=None)) -> bytes:
    """Caller identity as asserted by the transport/auth layer."""
    if not x_caller:
        raise MissingCallerError()
    try:
        return to_address(x_caller)
    except (ValueError, TypeError) as e:
        raise InvalidRequestError(f"Invalid caller address: {e}") from e

"""
Runtime Configuration

Central configuration for aggregation, redemption and service setup.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "DISTRIBUTOR_"

DUPLICATE_POLICIES = ("reject", "merge")


@dataclass
class AggregationConfig:
    """Configuration for building a distribution from raw entries."""
    # "reject" raises on a repeated (token, account); "merge" sums the amounts
    duplicate_policy: str = "reject"
    sort_entries: bool = False

    def __post_init__(self):
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"duplicate_policy must be one of {DUPLICATE_POLICIES}, "
                f"got {self.duplicate_policy!r}"
            )


@dataclass
class RedemptionConfig:
    """Configuration for the claim state machine."""
    operator: Optional[str] = None
    distributor_address: Optional[str] = None
    initial_root: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - JSON/YAML file
    - Programmatic construction
    """
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    redemption: RedemptionConfig = field(default_factory=RedemptionConfig)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - DISTRIBUTOR_DUPLICATE_POLICY: reject or merge
        - DISTRIBUTOR_SORT_ENTRIES: Sort entries before building (true/false)
        - DISTRIBUTOR_OPERATOR: Address allowed to replace the root
        - DISTRIBUTOR_ADDRESS: Address holding the distributed tokens
        - DISTRIBUTOR_MERKLE_ROOT: Root published at startup
        - DISTRIBUTOR_LOG_LEVEL: Log level
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}DUPLICATE_POLICY"):
            overrides.setdefault("aggregation", {})["duplicate_policy"] = (
                os.getenv(f"{ENV_PREFIX}DUPLICATE_POLICY", "reject").lower()
            )
        if os.getenv(f"{ENV_PREFIX}SORT_ENTRIES"):
            overrides.setdefault("aggregation", {})["sort_entries"] = (
                os.getenv(f"{ENV_PREFIX}SORT_ENTRIES", "false").lower() == "true"
            )

        if os.getenv(f"{ENV_PREFIX}OPERATOR"):
            overrides.setdefault("redemption", {})["operator"] = os.getenv(f"{ENV_PREFIX}OPERATOR")
        if os.getenv(f"{ENV_PREFIX}ADDRESS"):
            overrides.setdefault("redemption", {})["distributor_address"] = os.getenv(f"{ENV_PREFIX}ADDRESS")
        if os.getenv(f"{ENV_PREFIX}MERKLE_ROOT"):
            overrides.setdefault("redemption", {})["initial_root"] = os.getenv(f"{ENV_PREFIX}MERKLE_ROOT")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        aggregation_data = data.get("aggregation", {})
        redemption_data = data.get("redemption", {})

        aggregation = AggregationConfig(**aggregation_data) if aggregation_data else AggregationConfig()
        redemption = RedemptionConfig(**redemption_data) if redemption_data else RedemptionConfig()

        return cls(
            aggregation=aggregation,
            redemption=redemption,
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "aggregation" in overrides:
            for key, value in overrides["aggregation"].items():
                setattr(new_config.aggregation, key, value)
            new_config.aggregation.__post_init__()

        if "redemption" in overrides:
            for key, value in overrides["redemption"].items():
                setattr(new_config.redemption, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

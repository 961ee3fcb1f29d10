"""
Runtime Configuration Module

Provides configuration loading and management for aggregation and redemption.
"""

from .runtime import AggregationConfig, RedemptionConfig, RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "AggregationConfig",
    "RedemptionConfig",
]

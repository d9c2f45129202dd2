"""Derived-state computation: calculation strategies and state providers."""

from __future__ import annotations

from .providers import StateProvider, StatusProvider, StockStatusProvider, build_state_providers
from .strategies import DEFAULT_STRATEGIES, CalculationStrategy, CalculationStrategyRegistry

__all__ = [
    "DEFAULT_STRATEGIES",
    "CalculationStrategy",
    "CalculationStrategyRegistry",
    "StateProvider",
    "StatusProvider",
    "StockStatusProvider",
    "build_state_providers",
]

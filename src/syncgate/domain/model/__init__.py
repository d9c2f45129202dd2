"""Domain model exports."""

from __future__ import annotations

from .entity import (
    Entity,
    EntitySnapshot,
    Scope,
    ScopeSignals,
    SyncConditionValues,
    TargetKey,
)
from .enums import PRODUCT_ENTITY_TYPE, Aspect, CalculationMethod, ProductType, ProviderKind

__all__ = [
    "PRODUCT_ENTITY_TYPE",
    "Aspect",
    "CalculationMethod",
    "Entity",
    "EntitySnapshot",
    "ProductType",
    "ProviderKind",
    "Scope",
    "ScopeSignals",
    "SyncConditionValues",
    "TargetKey",
]

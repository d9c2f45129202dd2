"""Read models handed to the engine by host collaborators.

Everything here is immutable: one snapshot is shared by every per-scope
computation of an evaluation, including those running on worker threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import TYPE_CHECKING

from .enums import ProductType

if TYPE_CHECKING:
    from collections.abc import Mapping

type TargetKey = tuple[int, int | None]


def _require_positive(name: str, value: int | None) -> None:
    if value is not None and value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True, slots=True)
class Entity:
    """Identifies one synchronizable unit owned by a tenant."""

    target_id: int
    tenant_key: str
    target_parent_id: int | None = None

    def __post_init__(self) -> None:
        _require_positive("target_id", self.target_id)
        _require_positive("target_parent_id", self.target_parent_id)

    @property
    def is_variant(self) -> bool:
        return self.target_parent_id is not None

    @property
    def key(self) -> TargetKey:
        return (self.target_id, self.target_parent_id)


@dataclass(frozen=True, slots=True)
class Scope:
    """A store view under a tenant."""

    scope_id: str
    tenant_key: str
    website_id: int | None = None


@dataclass(frozen=True, slots=True)
class ScopeSignals:
    """Raw signals a product exposes in one scope; ``None`` means absent."""

    enabled: bool | None = None
    stock_item_in_stock: bool | None = None
    registry_in_stock: bool | None = None
    is_available: bool | None = None
    is_salable: bool | None = None

    def overlay(self, override: ScopeSignals | None) -> ScopeSignals:
        """Return these signals with every non-``None`` field of ``override`` applied."""

        if override is None:
            return self
        merged = {
            item.name: (
                getattr(override, item.name)
                if getattr(override, item.name) is not None
                else getattr(self, item.name)
            )
            for item in fields(self)
        }
        return ScopeSignals(**merged)


@dataclass(frozen=True, slots=True)
class EntitySnapshot:
    entity_id: int
    sku: str
    product_type: ProductType = ProductType.SIMPLE
    website_ids: frozenset[int] = field(default_factory=frozenset[int])
    default_signals: ScopeSignals = field(default_factory=ScopeSignals)
    scope_signals: Mapping[str, ScopeSignals] = field(
        default_factory=lambda: MappingProxyType({})
    )
    child_ids_by_option: tuple[tuple[int, ...], ...] = ()
    parent_ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        _require_positive("entity_id", self.entity_id)
        if not isinstance(self.scope_signals, MappingProxyType):
            object.__setattr__(self, "scope_signals", MappingProxyType(dict(self.scope_signals)))

    def signals_for(self, scope: Scope) -> ScopeSignals:
        return self.default_signals.overlay(self.scope_signals.get(scope.scope_id))

    def assigned_to(self, scope: Scope) -> bool:
        """Whether the product is published on the website the scope belongs to."""

        if scope.website_id is None:
            return True
        return scope.website_id in self.website_ids


@dataclass(frozen=True, slots=True)
class SyncConditionValues:
    """Derived sync conditions for one target key in one scope."""

    tenant_key: str
    scope_id: str
    target_id: int
    target_parent_id: int | None
    is_indexable: bool
    is_enabled: bool
    is_in_stock: bool

"""Providers computing the canonical enabled / in-stock state of a product.

Both providers share the same shape: load the entity (and its declared parent)
once through the repository, then compute a boolean per scope. A parent whose
own state is negative in a scope forces the variant's state to ``False``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from syncgate.domain.errors import NoSuchEntityError, UnresolvableCalculationInputError
from syncgate.domain.model import CalculationMethod, ProviderKind

from .strategies import CalculationStrategyRegistry

if TYPE_CHECKING:
    from collections.abc import Mapping

    from syncgate.config import EngineConfig
    from syncgate.domain.model import Entity, EntitySnapshot, Scope
    from syncgate.domain.ports import EntityRepository


@runtime_checkable
class StateProvider(Protocol):
    """Compute one derived boolean state for a snapshot in a scope."""

    kind: ClassVar[ProviderKind]

    def load(self, entity: Entity) -> tuple[EntitySnapshot, EntitySnapshot | None]: ...

    def get(
        self,
        snapshot: EntitySnapshot,
        scope: Scope,
        parent: EntitySnapshot | None = None,
    ) -> bool: ...


@dataclass(slots=True)
class _RepositoryProvider:
    repository: EntityRepository

    def load(self, entity: Entity) -> tuple[EntitySnapshot, EntitySnapshot | None]:
        """Resolve the entity and its declared parent; missing ids propagate."""

        snapshot = self.repository.get_by_id(entity.target_id)
        parent = (
            self.repository.get_by_id(entity.target_parent_id)
            if entity.target_parent_id is not None
            else None
        )
        return snapshot, parent


@dataclass(slots=True)
class StatusProvider(_RepositoryProvider):
    kind: ClassVar[ProviderKind] = ProviderKind.STATUS

    def get(
        self,
        snapshot: EntitySnapshot,
        scope: Scope,
        parent: EntitySnapshot | None = None,
    ) -> bool:
        if parent is not None and not self.get(parent, scope):
            return False

        enabled = snapshot.signals_for(scope).enabled
        if enabled is None:
            raise UnresolvableCalculationInputError(
                method=ProviderKind.STATUS,
                entity_id=snapshot.entity_id,
                scope_id=scope.scope_id,
                signal="enabled",
            )
        return enabled


@dataclass(slots=True)
class StockStatusProvider(_RepositoryProvider):
    kind: ClassVar[ProviderKind] = ProviderKind.STOCK_STATUS

    method: CalculationMethod = CalculationMethod.STOCK_ITEM
    strategies: CalculationStrategyRegistry = field(default_factory=CalculationStrategyRegistry)

    def get(
        self,
        snapshot: EntitySnapshot,
        scope: Scope,
        parent: EntitySnapshot | None = None,
    ) -> bool:
        return self._get(snapshot, scope, parent, visiting=frozenset())

    def has_children_in_stock(self, snapshot: EntitySnapshot, scope: Scope) -> bool:
        """Every required option of a composite needs at least one in-stock child."""

        return self._has_children_in_stock(snapshot, scope, visiting=frozenset())

    def _get(
        self,
        snapshot: EntitySnapshot,
        scope: Scope,
        parent: EntitySnapshot | None,
        *,
        visiting: frozenset[int],
    ) -> bool:
        if not snapshot.assigned_to(scope):
            return False

        if parent is not None and not self._get(parent, scope, None, visiting=visiting):
            return False

        if not self.strategies.compute(self.method, snapshot, scope):
            return False

        return self._has_children_in_stock(snapshot, scope, visiting=visiting)

    def _has_children_in_stock(
        self,
        snapshot: EntitySnapshot,
        scope: Scope,
        *,
        visiting: frozenset[int],
    ) -> bool:
        if not snapshot.product_type.is_composite:
            return True

        visiting = visiting | {snapshot.entity_id}
        for child_ids in snapshot.child_ids_by_option:
            if not any(
                self._child_in_stock(child_id, scope, visiting=visiting) for child_id in child_ids
            ):
                return False
        return True

    def _child_in_stock(self, child_id: int, scope: Scope, *, visiting: frozenset[int]) -> bool:
        if child_id in visiting:
            return False
        try:
            child = self.repository.get_by_id(child_id)
        except NoSuchEntityError:
            # deleted children do not count towards an option
            return False
        return self._get(child, scope, None, visiting=visiting)


def build_state_providers(
    repository: EntityRepository,
    *,
    config: EngineConfig | None = None,
    strategies: CalculationStrategyRegistry | None = None,
) -> Mapping[ProviderKind, StateProvider]:
    """Assemble the default providers, resolving the calculation method once."""

    registry = strategies or CalculationStrategyRegistry()
    method = (
        registry.resolve(config.calculation_method)
        if config is not None
        else CalculationMethod.default()
    )
    return {
        ProviderKind.STATUS: StatusProvider(repository=repository),
        ProviderKind.STOCK_STATUS: StockStatusProvider(
            repository=repository,
            method=method,
            strategies=registry,
        ),
    }

"""Facade exposing the engine's operations to the sync orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from syncgate.domain.aspects import AspectMapper, MappingAspectAssignmentTable
from syncgate.domain.criteria import (
    CriteriaRegistry,
    run_with_deadline,
    status_criterion,
    stock_status_criterion,
)
from syncgate.domain.indexability import IndexabilityConditions, SyncConditionsProvider
from syncgate.domain.model import ProviderKind
from syncgate.domain.reconciliation import ConflictReconciler, StockStatusTargetGrouper
from syncgate.domain.state import build_state_providers

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Mapping, Sequence

    from syncgate.config import EngineConfig
    from syncgate.domain.criteria import RecordedCriteriaValues, RequiresUpdateCriterion
    from syncgate.domain.model import Aspect, Entity, Scope, SyncConditionValues
    from syncgate.domain.ports import AspectAssignmentTable, EntityRepository, ScopeResolver
    from syncgate.domain.reconciliation import ReconciliationResult, TargetKeysByState
    from syncgate.domain.state import CalculationStrategyRegistry, StateProvider


@dataclass(slots=True)
class SyncRelevanceEngine:
    """Stateless entry point; every call reads fresh data from the collaborators."""

    scopes: ScopeResolver
    providers: Mapping[ProviderKind, StateProvider]
    criteria: CriteriaRegistry
    aspect_mapper: AspectMapper
    stock_targets: StockStatusTargetGrouper
    sync_conditions: SyncConditionsProvider
    reconciler: ConflictReconciler = field(default_factory=ConflictReconciler)
    lookup_timeout_seconds: float | None = None

    def evaluate_criterion(
        self,
        criterion_id: str,
        entity: Entity,
        recorded_values: RecordedCriteriaValues,
    ) -> bool:
        return self.criteria.get(criterion_id).requires_update(entity, recorded_values)

    def requires_update(self, entity: Entity, recorded_values: RecordedCriteriaValues) -> bool:
        return self.criteria.requires_update(entity, recorded_values)

    def compute_state(self, kind: ProviderKind | str, entity: Entity, scope: Scope) -> bool:
        """Compute one state for ``entity`` in ``scope``, honouring its declared parent."""

        provider = self.providers[ProviderKind(kind)]

        def compute() -> bool:
            snapshot, parent = provider.load(entity)
            return provider.get(snapshot, scope, parent)

        return run_with_deadline(
            compute,
            operation=f"{provider.kind} of entity {entity.target_id} in scope {scope.scope_id!r}",
            timeout_seconds=self.lookup_timeout_seconds,
        )

    def map_changed_attributes_to_aspects(self, attribute_ids: Iterable[str]) -> frozenset[Aspect]:
        return self.aspect_mapper.map(attribute_ids)

    def reconcile(self, states_by_target_id: Mapping[Hashable, bool]) -> ReconciliationResult:
        return self.reconciler.reconcile(states_by_target_id)

    def group_stock_status_targets(
        self,
        target_id: int,
        *,
        tenant_key: str | None = None,
        scopes: Sequence[Scope] | None = None,
    ) -> TargetKeysByState:
        if scopes is None:
            if tenant_key is None:
                raise ValueError("Provide either tenant_key or scopes")
            scopes = self.scopes.scopes_for_tenant(tenant_key)
        return self.stock_targets.group_by_product_id(target_id, scopes)

    def sync_condition_values(
        self,
        target_id: int,
        tenant_key: str,
    ) -> tuple[SyncConditionValues, ...]:
        return self.sync_conditions.get(target_id, tenant_key)


def build_engine(
    *,
    repository: EntityRepository,
    scopes: ScopeResolver,
    aspect_table: AspectAssignmentTable | None = None,
    config: EngineConfig | None = None,
    strategies: CalculationStrategyRegistry | None = None,
    extra_criteria: Iterable[RequiresUpdateCriterion] = (),
) -> SyncRelevanceEngine:
    """Assemble the engine with the built-in providers and criteria."""

    providers = build_state_providers(repository, config=config, strategies=strategies)
    status = providers[ProviderKind.STATUS]
    stock_status = providers[ProviderKind.STOCK_STATUS]
    max_concurrency = config.max_concurrency if config is not None else 1
    timeout_seconds = config.lookup_timeout_seconds if config is not None else None

    criteria = CriteriaRegistry(
        (
            status_criterion(
                status,
                scopes,
                max_concurrency=max_concurrency,
                timeout_seconds=timeout_seconds,
            ),
            stock_status_criterion(
                stock_status,
                scopes,
                max_concurrency=max_concurrency,
                timeout_seconds=timeout_seconds,
            ),
        )
    )
    for criterion in extra_criteria:
        criteria.register(criterion)

    conditions = IndexabilityConditions(
        status_provider=status,
        stock_status_provider=stock_status,
        exclude_disabled=config.exclude_disabled if config is not None else False,
        exclude_out_of_stock=config.exclude_out_of_stock if config is not None else False,
    )
    return SyncRelevanceEngine(
        scopes=scopes,
        providers=providers,
        criteria=criteria,
        aspect_mapper=AspectMapper(aspect_table or MappingAspectAssignmentTable()),
        stock_targets=StockStatusTargetGrouper(repository=repository, provider=stock_status),
        sync_conditions=SyncConditionsProvider(
            repository=repository,
            scopes=scopes,
            conditions=conditions,
        ),
        lookup_timeout_seconds=timeout_seconds,
    )

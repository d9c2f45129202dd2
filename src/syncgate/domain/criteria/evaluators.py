"""Criteria comparing recorded values against freshly computed state."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from syncgate.domain.model import PRODUCT_ENTITY_TYPE

from .contracts import STATUS_CRITERION_ID, STOCK_STATUS_CRITERION_ID
from .fanout import any_scope_diverges, run_with_deadline

if TYPE_CHECKING:
    from collections.abc import Sequence

    from syncgate.domain.model import Entity, EntitySnapshot, Scope
    from syncgate.domain.ports import ScopeResolver
    from syncgate.domain.state import StateProvider

    from .contracts import RecordedCriteriaValues


@dataclass(slots=True)
class ProviderCriterion:
    """Criterion backed by one state provider.

    The criterion stays inert until a first value has been recorded for it.
    Afterwards any scope of the tenant whose current state differs from the
    recorded one requires an update.
    """

    criterion_id: str
    provider: StateProvider
    scopes: ScopeResolver
    entity_type: str = PRODUCT_ENTITY_TYPE
    max_concurrency: int = 1
    timeout_seconds: float | None = None

    def applies_to(self, entity_type: str) -> bool:
        return entity_type == self.entity_type

    def requires_update(self, entity: Entity, recorded_values: RecordedCriteriaValues) -> bool:
        if self.criterion_id not in recorded_values:
            return False

        recorded = bool(recorded_values[self.criterion_id])
        started = time.monotonic()

        def gather() -> tuple[Sequence[Scope], EntitySnapshot, EntitySnapshot | None]:
            scopes = self.scopes.scopes_for_tenant(entity.tenant_key)
            return (scopes, *self.provider.load(entity))

        scopes, snapshot, parent = run_with_deadline(
            gather,
            operation=f"{self.criterion_id} inputs for entity {entity.target_id}",
            timeout_seconds=self.timeout_seconds,
        )

        def current_state(scope: Scope) -> bool:
            return self.provider.get(snapshot, scope, parent)

        return any_scope_diverges(
            scopes,
            current_state,
            expected=recorded,
            max_concurrency=self.max_concurrency,
            timeout_seconds=self._remaining(started),
        )

    def _remaining(self, started: float) -> float | None:
        if self.timeout_seconds is None:
            return None
        # loads and the scope scan share one budget
        return max(self.timeout_seconds - (time.monotonic() - started), 0.0)


def status_criterion(
    provider: StateProvider,
    scopes: ScopeResolver,
    *,
    max_concurrency: int = 1,
    timeout_seconds: float | None = None,
) -> ProviderCriterion:
    return ProviderCriterion(
        criterion_id=STATUS_CRITERION_ID,
        provider=provider,
        scopes=scopes,
        max_concurrency=max_concurrency,
        timeout_seconds=timeout_seconds,
    )


def stock_status_criterion(
    provider: StateProvider,
    scopes: ScopeResolver,
    *,
    max_concurrency: int = 1,
    timeout_seconds: float | None = None,
) -> ProviderCriterion:
    return ProviderCriterion(
        criterion_id=STOCK_STATUS_CRITERION_ID,
        provider=provider,
        scopes=scopes,
        max_concurrency=max_concurrency,
        timeout_seconds=timeout_seconds,
    )

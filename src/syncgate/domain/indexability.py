"""Indexability checks and per-scope sync condition values."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from syncgate.domain.errors import NoSuchEntityError
from syncgate.domain.model import SyncConditionValues

if TYPE_CHECKING:
    from syncgate.domain.model import EntitySnapshot, Scope
    from syncgate.domain.ports import EntityRepository, ScopeResolver
    from syncgate.domain.state import StateProvider

log = getLogger(__name__)


@dataclass(slots=True)
class IndexabilityConditions:
    """Exclude disabled and/or out-of-stock products when the checks are enabled."""

    status_provider: StateProvider
    stock_status_provider: StateProvider
    exclude_disabled: bool = False
    exclude_out_of_stock: bool = False

    def is_indexable(self, snapshot: EntitySnapshot, scope: Scope) -> bool:
        if self.exclude_disabled and not self.status_provider.get(snapshot, scope):
            log.debug(
                "Scope %s product %s not indexable due to status",
                scope.scope_id,
                snapshot.entity_id,
            )
            return False
        if self.exclude_out_of_stock and not self.stock_status_provider.get(snapshot, scope):
            log.debug(
                "Scope %s product %s not indexable due to stock status",
                scope.scope_id,
                snapshot.entity_id,
            )
            return False
        return True


@dataclass(slots=True)
class SyncConditionsProvider:
    repository: EntityRepository
    scopes: ScopeResolver
    conditions: IndexabilityConditions

    def get(self, target_id: int, tenant_key: str) -> tuple[SyncConditionValues, ...]:
        """Condition values per scope for the product and each parent it is a variant of.

        A missing product yields all-negative values for its standalone key. A
        missing parent yields all-negative values for that variant key.
        """

        snapshot = self._load(target_id)
        parents = (
            {parent_id: self._load(parent_id) for parent_id in snapshot.parent_ids}
            if snapshot is not None
            else {}
        )

        values: list[SyncConditionValues] = []
        for scope in self.scopes.scopes_for_tenant(tenant_key):
            values.append(self._values(tenant_key, scope, target_id, snapshot, None, None))
            for parent_id, parent in parents.items():
                values.append(
                    self._values(tenant_key, scope, target_id, snapshot, parent_id, parent)
                )
        return tuple(values)

    def _load(self, entity_id: int) -> EntitySnapshot | None:
        try:
            return self.repository.get_by_id(entity_id)
        except NoSuchEntityError:
            return None

    def _values(
        self,
        tenant_key: str,
        scope: Scope,
        target_id: int,
        snapshot: EntitySnapshot | None,
        parent_id: int | None,
        parent: EntitySnapshot | None,
    ) -> SyncConditionValues:
        if snapshot is None or (parent_id is not None and parent is None):
            return SyncConditionValues(
                tenant_key=tenant_key,
                scope_id=scope.scope_id,
                target_id=target_id,
                target_parent_id=parent_id,
                is_indexable=False,
                is_enabled=False,
                is_in_stock=False,
            )
        return SyncConditionValues(
            tenant_key=tenant_key,
            scope_id=scope.scope_id,
            target_id=target_id,
            target_parent_id=parent_id,
            is_indexable=self.conditions.is_indexable(snapshot, scope),
            is_enabled=self.conditions.status_provider.get(snapshot, scope, parent),
            is_in_stock=self.conditions.stock_status_provider.get(snapshot, scope, parent),
        )

"""Group the targets affected by a product's stock change by their stock status.

A product is indexed standalone and, for each composite parent it belongs to,
as a variant of that parent; each parent is indexed standalone too. For a
stock change the caller needs to know which of these target keys are now in
stock and which are out of stock, across every scope of the tenant. A key
that is in stock in one scope and out of stock in another cannot be assigned
one value and is reported as a conflict.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from syncgate.domain.errors import ConflictingStatesError, NoSuchEntityError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from syncgate.domain.model import EntitySnapshot, Scope, TargetKey
    from syncgate.domain.ports import EntityRepository
    from syncgate.domain.state import StateProvider

type TargetKeysByState = Mapping[bool, tuple[TargetKey, ...]]


@dataclass(slots=True)
class StockStatusTargetGrouper:
    repository: EntityRepository
    provider: StateProvider

    def group_by_product_id(self, product_id: int, scopes: Sequence[Scope]) -> TargetKeysByState:
        return self.group(self.repository.get_by_id(product_id), scopes)

    def group(self, snapshot: EntitySnapshot, scopes: Sequence[Scope]) -> TargetKeysByState:
        """Return target keys by stock status, merged across ``scopes``.

        Raises ``ConflictingStatesError`` with the merged grouping and the
        per-scope grouping when a key lands under both states.
        """

        parents = self._load_parents(snapshot)
        by_scope = {
            scope.scope_id: self._determine(snapshot, scope, parents) for scope in scopes
        }
        merged = _merge(by_scope.values())
        if set(merged[False]) & set(merged[True]):
            raise ConflictingStatesError(
                merged,
                by_scope=by_scope,
                message="Conflicting stock statuses found for target ids",
            )
        return merged

    def _load_parents(self, snapshot: EntitySnapshot) -> tuple[EntitySnapshot, ...]:
        parents: list[EntitySnapshot] = []
        for parent_id in snapshot.parent_ids:
            try:
                parents.append(self.repository.get_by_id(parent_id))
            except NoSuchEntityError:
                continue
        return tuple(parents)

    def _determine(
        self,
        snapshot: EntitySnapshot,
        scope: Scope,
        parents: tuple[EntitySnapshot, ...],
    ) -> TargetKeysByState:
        targets: dict[bool, list[TargetKey]] = {False: [], True: []}

        standalone = self.provider.get(snapshot, scope)
        targets[standalone].append((snapshot.entity_id, None))

        for parent in parents:
            as_variant = self.provider.get(snapshot, scope, parent)
            targets[as_variant].append((snapshot.entity_id, parent.entity_id))

            parent_standalone = self.provider.get(parent, scope)
            targets[parent_standalone].append((parent.entity_id, None))

        return MappingProxyType({state: tuple(keys) for state, keys in targets.items()})


def _merge(groupings: Iterable[TargetKeysByState]) -> TargetKeysByState:
    merged: dict[bool, dict[TargetKey, None]] = {False: {}, True: {}}
    for grouping in groupings:
        for state, keys in grouping.items():
            for key in keys:
                merged[state].setdefault(key, None)
    return MappingProxyType({state: tuple(keys) for state, keys in merged.items()})

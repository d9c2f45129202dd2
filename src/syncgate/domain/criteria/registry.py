"""Explicit registry of requires-update criteria, assembled once at start-up."""

from __future__ import annotations

from typing import TYPE_CHECKING

from syncgate.domain.errors import UnknownCriterionError
from syncgate.domain.model import PRODUCT_ENTITY_TYPE

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from syncgate.domain.model import Entity

    from .contracts import RecordedCriteriaValues, RequiresUpdateCriterion


class CriteriaRegistry:
    """Ordered collection of criteria keyed by criterion id."""

    def __init__(self, criteria: Iterable[RequiresUpdateCriterion] = ()) -> None:
        self._criteria: dict[str, RequiresUpdateCriterion] = {}
        for criterion in criteria:
            self.register(criterion)

    def register(self, criterion: RequiresUpdateCriterion) -> None:
        if criterion.criterion_id in self._criteria:
            raise ValueError(f"Criterion already registered: {criterion.criterion_id!r}")
        self._criteria[criterion.criterion_id] = criterion

    def get(self, criterion_id: str) -> RequiresUpdateCriterion:
        try:
            return self._criteria[criterion_id]
        except KeyError:
            raise UnknownCriterionError(criterion_id) from None

    def for_entity_type(self, entity_type: str) -> tuple[RequiresUpdateCriterion, ...]:
        return tuple(
            criterion for criterion in self._criteria.values() if criterion.applies_to(entity_type)
        )

    def requires_update(
        self,
        entity: Entity,
        recorded_values: RecordedCriteriaValues,
        *,
        entity_type: str = PRODUCT_ENTITY_TYPE,
    ) -> bool:
        """Whether any criterion applicable to ``entity_type`` requires an update."""

        return any(
            criterion.requires_update(entity, recorded_values)
            for criterion in self.for_entity_type(entity_type)
        )

    def __contains__(self, criterion_id: object) -> bool:
        return criterion_id in self._criteria

    def __iter__(self) -> Iterator[RequiresUpdateCriterion]:
        return iter(tuple(self._criteria.values()))

    def __len__(self) -> int:
        return len(self._criteria)

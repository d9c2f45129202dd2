"""Shared contracts for requires-update criteria."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from syncgate.domain.model import Entity

type RecordedCriteriaValues = Mapping[str, object]

STATUS_CRITERION_ID = "status"
STOCK_STATUS_CRITERION_ID = "stock_status"


@runtime_checkable
class RequiresUpdateCriterion(Protocol):
    """Decide whether an entity must be re-synchronized along one axis of change."""

    @property
    def criterion_id(self) -> str: ...

    def applies_to(self, entity_type: str) -> bool: ...

    def requires_update(
        self,
        entity: Entity,
        recorded_values: RecordedCriteriaValues,
    ) -> bool: ...

"""Exceptions raised by the change-relevance engine.

Every error is a contract towards the caller, who owns retry, logging and
user-facing messaging. Structured payloads are kept as attributes so callers can
inspect them programmatically.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping, Sequence

    from .model import CalculationMethod

type ConflictGroup = Mapping[bool, tuple[Hashable, ...]]


class SyncGateError(Exception):
    """Base class for engine errors."""


class NoSuchEntityError(SyncGateError, LookupError):
    """Raised when an entity or its declared parent cannot be resolved."""

    def __init__(self, entity_id: int, message: str | None = None) -> None:
        super().__init__(message or f"No such entity with id {entity_id}")
        self.entity_id = entity_id


class LookupTimeoutError(SyncGateError, TimeoutError):
    """Raised when a collaborator lookup exceeded the caller-imposed deadline."""

    def __init__(self, operation: str, timeout_seconds: float | None = None) -> None:
        detail = f" after {timeout_seconds}s" if timeout_seconds is not None else ""
        super().__init__(f"Lookup timed out{detail}: {operation}")
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class UnresolvableCalculationInputError(SyncGateError, ValueError):
    """Raised when a snapshot lacks the signal a calculation needs for a scope."""

    def __init__(
        self,
        *,
        method: CalculationMethod | str,
        entity_id: int,
        scope_id: str,
        signal: str,
    ) -> None:
        super().__init__(
            f"Cannot compute {method} for entity {entity_id} in scope {scope_id!r}: "
            f"missing {signal!r} signal"
        )
        self.method = method
        self.entity_id = entity_id
        self.scope_id = scope_id
        self.signal = signal


class ConflictingStatesError(SyncGateError):
    """Raised when related targets computed states that cannot be merged.

    ``conflict_group`` maps each computed state to the ids that produced it.
    ``by_scope`` optionally carries the same grouping per scope id.
    """

    def __init__(
        self,
        conflict_group: Mapping[bool, Sequence[Hashable]],
        *,
        by_scope: Mapping[str, Mapping[bool, Sequence[Hashable]]] | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message or "Conflicting states found for target ids")
        self.conflict_group: ConflictGroup = _freeze(conflict_group)
        self.by_scope: Mapping[str, ConflictGroup] = MappingProxyType(
            {scope_id: _freeze(group) for scope_id, group in (by_scope or {}).items()}
        )

    def target_ids_for(self, state: bool) -> tuple[Hashable, ...]:  # noqa: FBT001
        return self.conflict_group.get(state, ())


class UnknownCriterionError(SyncGateError, KeyError):
    """Raised when no evaluator is registered for a criterion id."""

    def __init__(self, criterion_id: str) -> None:
        super().__init__(criterion_id)
        self.criterion_id = criterion_id

    def __str__(self) -> str:
        return f"No evaluator registered for criterion {self.criterion_id!r}"


def _freeze(group: Mapping[bool, Sequence[Hashable]]) -> ConflictGroup:
    return MappingProxyType({state: tuple(ids) for state, ids in group.items()})

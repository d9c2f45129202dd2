"""Reconcile computed states across a batch of related targets.

Disagreement is an outcome in its own right: the reconciler never picks a
majority or a default. When states differ it raises ``ConflictingStatesError``
carrying every target id partitioned by the state it produced, and leaves the
resolution policy to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from syncgate.domain.errors import ConflictingStatesError

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Agreed state of a batch and the ids that agreed on it, in input order."""

    value: bool
    target_ids: tuple[Hashable, ...]


def reconcile_states(states_by_target_id: Mapping[Hashable, bool]) -> ReconciliationResult:
    """Return the single state shared by every target, or raise on disagreement."""

    if not states_by_target_id:
        raise ValueError("Cannot reconcile an empty batch of target states")

    grouped: dict[bool, list[Hashable]] = {}
    for target_id, state in states_by_target_id.items():
        grouped.setdefault(bool(state), []).append(target_id)

    if len(grouped) > 1:
        raise ConflictingStatesError({state: grouped[state] for state in (False, True)})

    ((value, target_ids),) = grouped.items()
    return ReconciliationResult(value=value, target_ids=tuple(target_ids))


class ConflictReconciler:
    """Stateless reconciler; kept as a class so it can be injected and replaced."""

    def reconcile(self, states_by_target_id: Mapping[Hashable, bool]) -> ReconciliationResult:
        return reconcile_states(states_by_target_id)

    def __call__(self, states_by_target_id: Mapping[Hashable, bool]) -> ReconciliationResult:
        return self.reconcile(states_by_target_id)

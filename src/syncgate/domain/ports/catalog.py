"""Ports for reading catalog state owned by the host platform."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from syncgate.domain.model import Aspect, EntitySnapshot, Scope


@runtime_checkable
class ScopeResolver(Protocol):
    """Return the ordered, duplicate-free scopes evaluated for a tenant."""

    def scopes_for_tenant(self, tenant_key: str) -> Sequence[Scope]: ...


@runtime_checkable
class EntityRepository(Protocol):
    """Load entity snapshots.

    Implementations raise ``NoSuchEntityError`` for unknown ids and may raise
    ``LookupTimeoutError`` when the backing store does not answer in time.
    """

    def get_by_id(self, entity_id: int) -> EntitySnapshot: ...


@runtime_checkable
class AspectAssignmentTable(Protocol):
    """Attribute metadata lookup: which aspect a changed attribute belongs to."""

    def get(self, attribute_id: str) -> Aspect | None: ...

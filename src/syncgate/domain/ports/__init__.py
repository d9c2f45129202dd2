"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import AspectAssignmentTable, EntityRepository, ScopeResolver

__all__ = [
    "AspectAssignmentTable",
    "EntityRepository",
    "ScopeResolver",
]

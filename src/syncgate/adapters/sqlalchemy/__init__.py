"""SQLAlchemy adapter package for syncgate."""

from __future__ import annotations

from .database import StartupError, configured_engine, is_started, session_factory, shutdown, startup
from .repositories import (
    SqlAlchemyAspectAssignmentTable,
    SqlAlchemyCatalogWriter,
    SqlAlchemyEntityRepository,
    SqlAlchemyScopeResolver,
)
from .tables import create_all_tables, metadata

__all__ = [
    "SqlAlchemyAspectAssignmentTable",
    "SqlAlchemyCatalogWriter",
    "SqlAlchemyEntityRepository",
    "SqlAlchemyScopeResolver",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "session_factory",
    "shutdown",
    "startup",
]

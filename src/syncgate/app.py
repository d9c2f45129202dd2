"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from syncgate.adapters.catalog_json import load_catalog_document, translate_catalog
from syncgate.adapters.sqlalchemy import (
    SqlAlchemyAspectAssignmentTable,
    SqlAlchemyCatalogWriter,
    SqlAlchemyEntityRepository,
    SqlAlchemyScopeResolver,
    is_started,
    session_factory,
    startup,
)
from syncgate.config import get_engine_config
from syncgate.domain.aspects import MappingAspectAssignmentTable
from syncgate.domain.engine import build_engine

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.orm import Session, sessionmaker

    from syncgate.config import EngineConfig
    from syncgate.domain.engine import SyncRelevanceEngine

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportCatalogResult:
    scopes: int
    products: int
    links: int
    aspects: int


def _ensure_started() -> None:
    if not is_started():
        startup()


def import_catalog(
    path: Path | str,
    *,
    sessions: sessionmaker[Session] | None = None,
) -> ImportCatalogResult:
    """Replace the stored catalog with the JSON document at ``path``."""

    if sessions is None:
        _ensure_started()
        sessions = session_factory()

    rows = translate_catalog(load_catalog_document(path))
    with sessions() as session, session.begin():
        SqlAlchemyCatalogWriter(session).replace(rows)

    result = ImportCatalogResult(
        scopes=len(rows.scopes),
        products=len(rows.products),
        links=len(rows.links),
        aspects=len(rows.aspects),
    )
    log.info(
        "Imported catalog from %s: scopes=%s, products=%s, links=%s, aspects=%s",
        path,
        result.scopes,
        result.products,
        result.links,
        result.aspects,
    )
    return result


def open_engine(
    *,
    config: EngineConfig | None = None,
    sessions: sessionmaker[Session] | None = None,
) -> SyncRelevanceEngine:
    """Build an engine reading the stored catalog."""

    if sessions is None:
        _ensure_started()
        sessions = session_factory()

    effective_config = config or get_engine_config()
    log.debug(
        "Opening engine: method=%s, max_concurrency=%s, timeout=%s",
        effective_config.calculation_method,
        effective_config.max_concurrency,
        effective_config.lookup_timeout_seconds,
    )
    return build_engine(
        repository=SqlAlchemyEntityRepository(sessions),
        scopes=SqlAlchemyScopeResolver(sessions),
        aspect_table=SqlAlchemyAspectAssignmentTable(
            sessions,
            fallback=MappingAspectAssignmentTable(),
        ),
        config=effective_config,
    )

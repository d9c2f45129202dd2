from __future__ import annotations

from typing import TYPE_CHECKING

from syncgate.app import import_catalog, open_engine
from syncgate.config import EngineConfig
from syncgate.domain.model import Aspect, Entity
from tests.helpers.catalog import TENANT

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session, sessionmaker


def test_import_catalog_reports_counts(
    catalog_path: Path,
    sqlite_sessions: sessionmaker[Session],
) -> None:
    result = import_catalog(catalog_path, sessions=sqlite_sessions)

    assert (result.scopes, result.products, result.links, result.aspects) == (3, 3, 2, 3)


def test_engine_reads_imported_catalog(
    catalog_path: Path,
    sqlite_sessions: sessionmaker[Session],
) -> None:
    import_catalog(catalog_path, sessions=sqlite_sessions)
    engine = open_engine(config=EngineConfig(max_concurrency=2), sessions=sqlite_sessions)
    recorded = {"stock_status": True, "status": True}

    assert engine.evaluate_criterion("stock_status", Entity(1, TENANT), recorded) is True
    assert engine.evaluate_criterion("stock_status", Entity(2, TENANT), recorded) is False
    assert engine.evaluate_criterion("status", Entity(2, TENANT, 10), recorded) is False
    assert engine.map_changed_attributes_to_aspects(["color", "visibility"]) == frozenset(
        {Aspect.ATTRIBUTES, Aspect.VISIBILITY}
    )
    assert engine.map_changed_attributes_to_aspects(["price", "color"]) == frozenset({Aspect.ALL})


def test_app_uses_started_adapter(catalog_path: Path, started_adapter: Engine) -> None:
    _ = started_adapter
    import_catalog(catalog_path)

    engine = open_engine(config=EngineConfig())

    grouping = engine.group_stock_status_targets(2, tenant_key=TENANT)
    assert grouping[True] == ((2, None), (2, 10), (10, None))

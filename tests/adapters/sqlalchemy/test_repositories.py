"""Tests for the SQLAlchemy catalog repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from syncgate.adapters.catalog_json import CatalogDocument, translate_catalog
from syncgate.adapters.sqlalchemy import (
    SqlAlchemyAspectAssignmentTable,
    SqlAlchemyCatalogWriter,
    SqlAlchemyEntityRepository,
    SqlAlchemyScopeResolver,
)
from syncgate.adapters.sqlalchemy.tables import product_link_table, product_table
from syncgate.domain.aspects import MappingAspectAssignmentTable
from syncgate.domain.errors import LookupTimeoutError, NoSuchEntityError
from syncgate.domain.model import Aspect, ProductType, Scope, ScopeSignals
from tests.helpers.catalog import TENANT, sample_catalog_payload

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker


@pytest.fixture
def loaded_sessions(sqlite_sessions: sessionmaker[Session]) -> sessionmaker[Session]:
    rows = translate_catalog(CatalogDocument.model_validate(sample_catalog_payload()))
    with sqlite_sessions() as session, session.begin():
        SqlAlchemyCatalogWriter(session).replace(rows)
    return sqlite_sessions


def _timing_out_factory() -> sessionmaker[Session]:
    def factory() -> Session:
        raise PoolTimeoutError("QueuePool limit reached")

    return cast("sessionmaker[Session]", factory)


def test_scope_resolver_keeps_document_order(loaded_sessions: sessionmaker[Session]) -> None:
    resolver = SqlAlchemyScopeResolver(loaded_sessions)

    assert resolver.scopes_for_tenant(TENANT) == (
        Scope(scope_id="default", tenant_key=TENANT, website_id=1),
        Scope(scope_id="french", tenant_key=TENANT, website_id=1),
    )
    assert resolver.scopes_for_tenant("tenant-b") == (
        Scope(scope_id="outlet", tenant_key="tenant-b"),
    )
    assert resolver.scopes_for_tenant("unknown") == ()


def test_entity_repository_builds_snapshot(loaded_sessions: sessionmaker[Session]) -> None:
    repository = SqlAlchemyEntityRepository(loaded_sessions)

    variant = repository.get_by_id(1)
    parent = repository.get_by_id(10)

    assert variant.sku == "SHIRT-S"
    assert variant.product_type is ProductType.SIMPLE
    assert variant.website_ids == frozenset({1})
    assert variant.default_signals == ScopeSignals(enabled=True, stock_item_in_stock=True)
    assert variant.scope_signals["french"] == ScopeSignals(stock_item_in_stock=False)
    assert variant.parent_ids == (10,)
    assert variant.child_ids_by_option == ()
    assert parent.product_type is ProductType.CONFIGURABLE
    assert parent.child_ids_by_option == ((1, 2),)
    assert parent.parent_ids == ()


def test_entity_repository_raises_for_unknown_ids(
    loaded_sessions: sessionmaker[Session],
) -> None:
    with pytest.raises(NoSuchEntityError) as exc_info:
        SqlAlchemyEntityRepository(loaded_sessions).get_by_id(404)

    assert exc_info.value.entity_id == 404


def test_pool_timeouts_become_lookup_timeouts() -> None:
    factory = _timing_out_factory()

    with pytest.raises(LookupTimeoutError, match="get_by_id"):
        SqlAlchemyEntityRepository(factory).get_by_id(1)
    with pytest.raises(LookupTimeoutError, match="scopes_for_tenant"):
        SqlAlchemyScopeResolver(factory).scopes_for_tenant(TENANT)
    with pytest.raises(LookupTimeoutError, match="aspect_for"):
        SqlAlchemyAspectAssignmentTable(factory).get("price")


def test_aspect_table_prefers_stored_rows(loaded_sessions: sessionmaker[Session]) -> None:
    table = SqlAlchemyAspectAssignmentTable(
        loaded_sessions,
        fallback=MappingAspectAssignmentTable(),
    )

    assert table.get("color") is Aspect.ATTRIBUTES
    assert table.get("seo_title") is Aspect.NONE
    assert table.get("price") is Aspect.ALL
    assert table.get("visibility") is Aspect.VISIBILITY
    assert table.get("unknown") is None


def test_aspect_table_without_fallback(loaded_sessions: sessionmaker[Session]) -> None:
    table = SqlAlchemyAspectAssignmentTable(loaded_sessions)

    assert table.get("visibility") is None


def test_writer_replaces_previous_catalog(loaded_sessions: sessionmaker[Session]) -> None:
    document = CatalogDocument.model_validate({"products": [{"id": 7, "sku": "NEW"}]})
    with loaded_sessions() as session, session.begin():
        SqlAlchemyCatalogWriter(session).replace(translate_catalog(document))

    with loaded_sessions() as session:
        product_ids = session.execute(select(product_table.c.id)).scalars().all()
        links = session.execute(select(func.count()).select_from(product_link_table)).scalar_one()

    assert product_ids == [7]
    assert links == 0
    with pytest.raises(NoSuchEntityError):
        SqlAlchemyEntityRepository(loaded_sessions).get_by_id(1)

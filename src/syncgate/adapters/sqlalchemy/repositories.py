"""Port implementations reading the catalog tables."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from syncgate.domain.errors import LookupTimeoutError, NoSuchEntityError
from syncgate.domain.model import Aspect, EntitySnapshot, ProductType, Scope, ScopeSignals

from .tables import (
    ALL_TABLES,
    SIGNAL_COLUMNS,
    attribute_aspect_table,
    product_link_table,
    product_scope_signal_table,
    product_table,
    product_website_table,
    scope_table,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import Table
    from sqlalchemy.engine import RowMapping
    from sqlalchemy.orm import Session, sessionmaker

    from syncgate.adapters.catalog_json import CatalogRows
    from syncgate.domain.ports import AspectAssignmentTable


class SqlAlchemyScopeResolver:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def scopes_for_tenant(self, tenant_key: str) -> Sequence[Scope]:
        stmt = (
            select(scope_table)
            .where(scope_table.c.tenant_key == tenant_key)
            .order_by(scope_table.c.position, scope_table.c.scope_id)
        )
        try:
            with self.session_factory() as session:
                rows = session.execute(stmt).mappings().all()
        except PoolTimeoutError as exc:
            raise LookupTimeoutError(f"scopes_for_tenant({tenant_key!r})") from exc
        return tuple(
            Scope(
                scope_id=row["scope_id"],
                tenant_key=row["tenant_key"],
                website_id=row["website_id"],
            )
            for row in rows
        )


class SqlAlchemyEntityRepository:
    """Build product snapshots from the catalog tables.

    Every lookup runs in its own short-lived session so the repository can be
    shared by the engine's worker threads.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_by_id(self, entity_id: int) -> EntitySnapshot:
        try:
            with self.session_factory() as session:
                snapshot = self._load(session, entity_id)
        except PoolTimeoutError as exc:
            raise LookupTimeoutError(f"get_by_id({entity_id})") from exc
        if snapshot is None:
            raise NoSuchEntityError(entity_id)
        return snapshot

    def _load(self, session: Session, entity_id: int) -> EntitySnapshot | None:
        product = (
            session.execute(select(product_table).where(product_table.c.id == entity_id))
            .mappings()
            .one_or_none()
        )
        if product is None:
            return None

        website_ids = session.execute(
            select(product_website_table.c.website_id).where(
                product_website_table.c.product_id == entity_id
            )
        ).scalars()
        scope_rows = (
            session.execute(
                select(product_scope_signal_table).where(
                    product_scope_signal_table.c.product_id == entity_id
                )
            )
            .mappings()
            .all()
        )
        child_rows = session.execute(
            select(product_link_table.c.option_index, product_link_table.c.child_id)
            .where(product_link_table.c.parent_id == entity_id)
            .order_by(product_link_table.c.option_index, product_link_table.c.child_id)
        ).all()
        parent_ids = session.execute(
            select(product_link_table.c.parent_id)
            .where(product_link_table.c.child_id == entity_id)
            .distinct()
            .order_by(product_link_table.c.parent_id)
        ).scalars()

        options: dict[int, list[int]] = defaultdict(list)
        for option_index, child_id in child_rows:
            options[option_index].append(child_id)

        return EntitySnapshot(
            entity_id=product["id"],
            sku=product["sku"],
            product_type=ProductType(product["product_type"]),
            website_ids=frozenset(website_ids),
            default_signals=_signals(product),
            scope_signals={row["scope_id"]: _signals(row) for row in scope_rows},
            child_ids_by_option=tuple(tuple(options[index]) for index in sorted(options)),
            parent_ids=tuple(parent_ids),
        )


class SqlAlchemyAspectAssignmentTable:
    """Stored assignments, consulting ``fallback`` for attributes without a row."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        fallback: AspectAssignmentTable | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.fallback = fallback

    def get(self, attribute_id: str) -> Aspect | None:
        stmt = select(attribute_aspect_table.c.aspect).where(
            attribute_aspect_table.c.attribute_id == attribute_id
        )
        try:
            with self.session_factory() as session:
                value = session.execute(stmt).scalar_one_or_none()
        except PoolTimeoutError as exc:
            raise LookupTimeoutError(f"aspect_for({attribute_id!r})") from exc
        if value is None:
            return self.fallback.get(attribute_id) if self.fallback is not None else None
        try:
            return Aspect(value)
        except ValueError:
            return None


class SqlAlchemyCatalogWriter:
    """Replace the stored catalog with a translated document."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def replace(self, rows: CatalogRows) -> None:
        for table in reversed(ALL_TABLES):
            self.session.execute(delete(table))
        self._insert(scope_table, rows.scopes)
        self._insert(product_table, rows.products)
        self._insert(product_website_table, rows.product_websites)
        self._insert(product_scope_signal_table, rows.scope_signals)
        self._insert(product_link_table, rows.links)
        self._insert(attribute_aspect_table, rows.aspects)

    def _insert(self, table: Table, rows: Sequence[Mapping[str, object]]) -> None:
        if rows:
            self.session.execute(insert(table), list(rows))


def _signals(row: RowMapping) -> ScopeSignals:
    return ScopeSignals(**{name: row[name] for name in SIGNAL_COLUMNS})

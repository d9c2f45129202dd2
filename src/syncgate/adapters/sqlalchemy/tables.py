"""SQLAlchemy Core tables holding the catalog the engine reads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()

SIGNAL_COLUMNS = (
    "enabled",
    "stock_item_in_stock",
    "registry_in_stock",
    "is_available",
    "is_salable",
)


def _signal_columns() -> list[Column[bool]]:
    return [Column(name, Boolean, nullable=True) for name in SIGNAL_COLUMNS]


scope_table = Table(
    "scope",
    metadata,
    Column("scope_id", String(64), primary_key=True),
    Column("tenant_key", String(128), nullable=False, index=True),
    Column("website_id", Integer, nullable=True),
    Column("position", Integer, nullable=False, default=0),
)

product_table = Table(
    "product",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("sku", String(255), nullable=False, unique=True),
    Column("product_type", String(32), nullable=False),
    *_signal_columns(),
)

product_website_table = Table(
    "product_website",
    metadata,
    Column("product_id", ForeignKey("product.id", ondelete="CASCADE"), primary_key=True),
    Column("website_id", Integer, primary_key=True),
)

product_scope_signal_table = Table(
    "product_scope_signal",
    metadata,
    Column("product_id", ForeignKey("product.id", ondelete="CASCADE"), primary_key=True),
    Column("scope_id", ForeignKey("scope.scope_id", ondelete="CASCADE"), primary_key=True),
    *_signal_columns(),
)

# child_id has no foreign key; links may reference deleted children
product_link_table = Table(
    "product_link",
    metadata,
    Column("parent_id", ForeignKey("product.id", ondelete="CASCADE"), primary_key=True),
    Column("option_index", Integer, primary_key=True),
    Column("child_id", Integer, primary_key=True, index=True),
)

attribute_aspect_table = Table(
    "attribute_aspect",
    metadata,
    Column("attribute_id", String(255), primary_key=True),
    Column("aspect", Integer, nullable=False),
)

ALL_TABLES = (
    scope_table,
    product_table,
    product_website_table,
    product_scope_signal_table,
    product_link_table,
    attribute_aspect_table,
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine, checkfirst=True)

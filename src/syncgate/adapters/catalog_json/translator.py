"""Translate a catalog document into rows for the catalog tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .schema import CatalogDocument

if TYPE_CHECKING:
    from .schema import ProductPayload, SignalsPayload

type Row = dict[str, object]


@dataclass(slots=True)
class CatalogRows:
    scopes: list[Row] = field(default_factory=list[Row])
    products: list[Row] = field(default_factory=list[Row])
    product_websites: list[Row] = field(default_factory=list[Row])
    scope_signals: list[Row] = field(default_factory=list[Row])
    links: list[Row] = field(default_factory=list[Row])
    aspects: list[Row] = field(default_factory=list[Row])


def load_catalog_document(path: Path | str) -> CatalogDocument:
    return CatalogDocument.model_validate_json(Path(path).read_text(encoding="utf-8"))


def translate_catalog(document: CatalogDocument) -> CatalogRows:
    """Flatten ``document`` into table rows.

    Raises ``ValueError`` when a product references a scope the document does
    not declare, or when product ids repeat.
    """

    rows = CatalogRows()
    scope_ids = set[str]()
    for position, scope in enumerate(document.scopes):
        if scope.id in scope_ids:
            raise ValueError(f"Duplicate scope id {scope.id!r}")
        scope_ids.add(scope.id)
        rows.scopes.append(
            {
                "scope_id": scope.id,
                "tenant_key": scope.tenant,
                "website_id": scope.website_id,
                "position": position,
            }
        )

    product_ids = set[int]()
    for product in document.products:
        if product.id in product_ids:
            raise ValueError(f"Duplicate product id {product.id}")
        product_ids.add(product.id)
        _translate_product(product, scope_ids, rows)

    rows.aspects.extend(
        {"attribute_id": attribute_id, "aspect": int(aspect)}
        for attribute_id, aspect in document.aspects.items()
    )
    return rows


def _translate_product(product: ProductPayload, scope_ids: set[str], rows: CatalogRows) -> None:
    rows.products.append(
        {
            "id": product.id,
            "sku": product.sku,
            "product_type": product.type.value,
            **_signal_values(product.signals),
        }
    )
    rows.product_websites.extend(
        {"product_id": product.id, "website_id": website_id}
        for website_id in sorted(set(product.website_ids))
    )
    for scope_id, signals in product.scope_signals.items():
        if scope_id not in scope_ids:
            raise ValueError(f"Product {product.id} references unknown scope {scope_id!r}")
        rows.scope_signals.append(
            {"product_id": product.id, "scope_id": scope_id, **_signal_values(signals)}
        )
    for option_index, child_ids in enumerate(product.options):
        rows.links.extend(
            {"parent_id": product.id, "option_index": option_index, "child_id": child_id}
            for child_id in dict.fromkeys(child_ids)
        )


def _signal_values(signals: SignalsPayload) -> Row:
    return signals.model_dump()

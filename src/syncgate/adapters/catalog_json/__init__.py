"""JSON catalog import: document schema and translation into catalog rows."""

from __future__ import annotations

from .schema import CatalogDocument, ProductPayload, ScopePayload, SignalsPayload
from .translator import CatalogRows, load_catalog_document, translate_catalog

__all__ = [
    "CatalogDocument",
    "CatalogRows",
    "ProductPayload",
    "ScopePayload",
    "SignalsPayload",
    "load_catalog_document",
    "translate_catalog",
]

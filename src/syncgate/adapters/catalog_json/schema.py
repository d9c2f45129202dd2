"""Pydantic models for the JSON catalog document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from syncgate.domain.model import Aspect, ProductType


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SignalsPayload(CatalogBaseModel):
    enabled: bool | None = None
    stock_item_in_stock: bool | None = None
    registry_in_stock: bool | None = None
    is_available: bool | None = None
    is_salable: bool | None = None


class ScopePayload(CatalogBaseModel):
    id: str
    tenant: str
    website_id: int | None = None


class ProductPayload(CatalogBaseModel):
    id: int = Field(gt=0)
    sku: str
    type: ProductType = ProductType.SIMPLE
    website_ids: list[int] = Field(default_factory=list)
    signals: SignalsPayload = Field(default_factory=SignalsPayload)
    scope_signals: dict[str, SignalsPayload] = Field(default_factory=dict)
    # one entry per required option, listing candidate child ids
    options: list[list[int]] = Field(default_factory=list)


class CatalogDocument(CatalogBaseModel):
    scopes: list[ScopePayload] = Field(default_factory=list["ScopePayload"])
    products: list[ProductPayload] = Field(default_factory=list["ProductPayload"])
    aspects: dict[str, Aspect] = Field(default_factory=dict)

    @field_validator("aspects", mode="before")
    @classmethod
    def parse_aspect_names(cls, value: object) -> object:
        # accept member names ("PRICE") as well as integer values
        if not isinstance(value, dict):
            return value
        return {key: _aspect_from_name(raw) for key, raw in value.items()}


def _aspect_from_name(raw: object) -> object:
    if not isinstance(raw, str):
        return raw
    try:
        return Aspect[raw.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown aspect {raw!r}") from exc

"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Aspect(IntEnum):
    """Coarse category of catalog change used to size a re-sync.

    Values are stable because they are stored in attribute metadata and in the
    synchronization ledger.
    """

    NONE = 0
    ALL = 1
    ATTRIBUTES = 2
    RELATIONS = 3
    # 4 (display-only attributes) has no member; stored rows holding it map to nothing
    PRICE = 5
    STOCK = 6
    VISIBILITY = 7

    @property
    def label(self) -> str:
        return _ASPECT_LABELS[self]


_ASPECT_LABELS: dict[Aspect, str] = {
    Aspect.NONE: "Nothing",
    Aspect.ALL: "Everything",
    Aspect.ATTRIBUTES: "Indexed Attributes",
    Aspect.RELATIONS: "Relations",
    Aspect.PRICE: "Price",
    Aspect.STOCK: "Stock",
    Aspect.VISIBILITY: "Visibility",
}


class CalculationMethod(StrEnum):
    STOCK_ITEM = "stock_item"
    STOCK_REGISTRY = "stock_registry"
    IS_AVAILABLE = "is_available"
    IS_SALABLE = "is_salable"

    @classmethod
    def default(cls) -> CalculationMethod:
        return cls.STOCK_ITEM


class ProductType(StrEnum):
    SIMPLE = "simple"
    VIRTUAL = "virtual"
    DOWNLOADABLE = "downloadable"
    BUNDLE = "bundle"
    CONFIGURABLE = "configurable"
    GROUPED = "grouped"

    @property
    def is_composite(self) -> bool:
        return self in _COMPOSITE_TYPES


_COMPOSITE_TYPES = frozenset({ProductType.BUNDLE, ProductType.CONFIGURABLE, ProductType.GROUPED})


class ProviderKind(StrEnum):
    """Which derived boolean state a provider computes."""

    STATUS = "status"
    STOCK_STATUS = "stock_status"


PRODUCT_ENTITY_TYPE = "product"

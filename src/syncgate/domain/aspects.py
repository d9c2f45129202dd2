"""Map changed attribute identifiers to the aspects of a product they touch."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from syncgate.domain.model import Aspect

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from syncgate.domain.ports import AspectAssignmentTable

DEFAULT_ASPECT_MAPPING: Mapping[str, Aspect] = MappingProxyType(
    {
        "category_ids": Aspect.RELATIONS,
        "description": Aspect.ATTRIBUTES,
        "image": Aspect.ATTRIBUTES,
        "meta_description": Aspect.ATTRIBUTES,
        "meta_keyword": Aspect.ATTRIBUTES,
        "minimal_price": Aspect.PRICE,
        "name": Aspect.ATTRIBUTES,
        "price": Aspect.PRICE,
        "price_type": Aspect.PRICE,
        "price_view": Aspect.PRICE,
        "quantity_and_stock_status": Aspect.STOCK,
        "rating": Aspect.ATTRIBUTES,
        "rating_count": Aspect.ATTRIBUTES,
        "short_description": Aspect.ATTRIBUTES,
        "sku": Aspect.ATTRIBUTES,
        "sku_type": Aspect.ATTRIBUTES,
        "special_from_date": Aspect.PRICE,
        "special_price": Aspect.PRICE,
        "special_to_date": Aspect.PRICE,
        "status": Aspect.ATTRIBUTES,
        "tax_class_id": Aspect.PRICE,
        "tier_price": Aspect.PRICE,
        "url_key": Aspect.ATTRIBUTES,
        "url_path": Aspect.ATTRIBUTES,
        "visibility": Aspect.VISIBILITY,
    }
)


@dataclass(slots=True)
class MappingAspectAssignmentTable:
    """Assignment table backed by a plain mapping, the built-in defaults unless given."""

    assignments: Mapping[str, Aspect] = field(default_factory=lambda: DEFAULT_ASPECT_MAPPING)

    @classmethod
    def with_overrides(cls, overrides: Mapping[str, Aspect]) -> MappingAspectAssignmentTable:
        return cls(assignments=MappingProxyType({**DEFAULT_ASPECT_MAPPING, **overrides}))

    def get(self, attribute_id: str) -> Aspect | None:
        return self.assignments.get(attribute_id)


@dataclass(slots=True)
class AspectMapper:
    table: AspectAssignmentTable

    def map(self, attribute_ids: Iterable[str]) -> frozenset[Aspect]:
        """Return the distinct aspects touched by ``attribute_ids``.

        Unmapped attributes and ``NONE`` contribute nothing. ``ALL`` absorbs every
        other aspect, so a result containing it is exactly ``{ALL}``.
        """

        aspects: set[Aspect] = set()
        for attribute_id in attribute_ids:
            aspect = _coerce(self.table.get(attribute_id))
            if aspect is None or aspect is Aspect.NONE:
                continue
            if aspect is Aspect.ALL:
                return frozenset({Aspect.ALL})
            aspects.add(aspect)
        return frozenset(aspects)


def _coerce(value: Aspect | int | None) -> Aspect | None:
    # tables backed by storage may hand back the raw integer
    if value is None or isinstance(value, Aspect):
        return value
    try:
        return Aspect(int(value))
    except ValueError:
        return None

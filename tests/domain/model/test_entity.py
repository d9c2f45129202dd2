from __future__ import annotations

from types import MappingProxyType

import pytest

from syncgate.domain.model import Entity, ProductType, ScopeSignals
from tests.helpers.catalog import TENANT, make_product, make_scope


@pytest.mark.parametrize(("target_id", "parent_id"), [(0, None), (-1, None), (1, 0)])
def test_entity_rejects_non_positive_ids(target_id: int, parent_id: int | None) -> None:
    with pytest.raises(ValueError, match="positive"):
        Entity(target_id=target_id, tenant_key=TENANT, target_parent_id=parent_id)


def test_entity_key_and_variant_flag() -> None:
    assert Entity(1, TENANT).key == (1, None)
    assert Entity(1, TENANT, 10).key == (1, 10)
    assert Entity(1, TENANT, 10).is_variant is True
    assert Entity(1, TENANT).is_variant is False


def test_overlay_keeps_defaults_for_absent_fields() -> None:
    defaults = ScopeSignals(enabled=True, stock_item_in_stock=True, is_salable=True)

    merged = defaults.overlay(ScopeSignals(stock_item_in_stock=False))

    assert merged == ScopeSignals(enabled=True, stock_item_in_stock=False, is_salable=True)
    assert defaults.overlay(None) is defaults


def test_snapshot_freezes_scope_signals() -> None:
    overrides = {"french": ScopeSignals(enabled=False)}
    snapshot = make_product(1, scope_signals=overrides)
    overrides["german"] = ScopeSignals(enabled=False)

    assert isinstance(snapshot.scope_signals, MappingProxyType)
    assert "german" not in snapshot.scope_signals
    assert snapshot.signals_for(make_scope("german")).enabled is True


def test_snapshot_website_assignment() -> None:
    snapshot = make_product(1, website_ids=(1, 3))

    assert snapshot.assigned_to(make_scope(website_id=3))
    assert not snapshot.assigned_to(make_scope(website_id=2))
    assert snapshot.assigned_to(make_scope())


def test_composite_product_types() -> None:
    assert {t for t in ProductType if t.is_composite} == {
        ProductType.BUNDLE,
        ProductType.CONFIGURABLE,
        ProductType.GROUPED,
    }

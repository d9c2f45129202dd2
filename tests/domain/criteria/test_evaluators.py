from __future__ import annotations

import pytest

from syncgate.domain.criteria import (
    STATUS_CRITERION_ID,
    STOCK_STATUS_CRITERION_ID,
    status_criterion,
    stock_status_criterion,
)
from syncgate.domain.errors import LookupTimeoutError, NoSuchEntityError
from syncgate.domain.model import Entity, ScopeSignals
from syncgate.domain.state import StatusProvider, StockStatusProvider
from tests.helpers.catalog import (
    TENANT,
    BlockingEntityRepository,
    InMemoryEntityRepository,
    InMemoryScopeResolver,
    make_product,
    make_scope,
    out_of_stock,
    shirt_catalog,
)


def _entity(target_id: int, parent_id: int | None = None) -> Entity:
    return Entity(target_id=target_id, tenant_key=TENANT, target_parent_id=parent_id)


def test_missing_recorded_value_is_inert() -> None:
    scopes, repository = shirt_catalog()
    criterion = stock_status_criterion(StockStatusProvider(repository), scopes)

    assert criterion.requires_update(_entity(1), {}) is False
    assert criterion.requires_update(_entity(1), {STATUS_CRITERION_ID: True}) is False
    assert scopes.calls == []
    assert repository.calls == []


def test_stock_status_matches_in_every_scope() -> None:
    scopes, repository = shirt_catalog()
    criterion = stock_status_criterion(StockStatusProvider(repository), scopes)

    assert criterion.requires_update(_entity(2), {STOCK_STATUS_CRITERION_ID: True}) is False


def test_stock_status_flip_in_one_scope_requires_update() -> None:
    scopes = InMemoryScopeResolver([make_scope("default"), make_scope("french")])
    repository = InMemoryEntityRepository([make_product(1)])
    criterion = stock_status_criterion(StockStatusProvider(repository), scopes)
    recorded = {STOCK_STATUS_CRITERION_ID: True}

    assert criterion.requires_update(_entity(1), recorded) is False

    repository.add(make_product(1, scope_signals={"french": out_of_stock()}))

    assert criterion.requires_update(_entity(1), recorded) is True


def test_recorded_values_are_coerced_to_bool() -> None:
    scopes, repository = shirt_catalog()
    criterion = status_criterion(StatusProvider(repository), scopes)

    assert criterion.requires_update(_entity(1), {STATUS_CRITERION_ID: 1}) is False
    assert criterion.requires_update(_entity(1), {STATUS_CRITERION_ID: 0}) is True


def test_status_of_variant_follows_disabled_parent() -> None:
    scopes = InMemoryScopeResolver([make_scope("default")])
    repository = InMemoryEntityRepository([make_product(1), make_product(10, enabled=False)])
    criterion = status_criterion(StatusProvider(repository), scopes)
    recorded = {STATUS_CRITERION_ID: True}

    assert criterion.requires_update(_entity(1), recorded) is False
    assert criterion.requires_update(_entity(1, parent_id=10), recorded) is True


def test_tenant_without_scopes_requires_nothing() -> None:
    repository = InMemoryEntityRepository([make_product(1, enabled=False)])
    criterion = status_criterion(StatusProvider(repository), InMemoryScopeResolver())

    assert criterion.requires_update(_entity(1), {STATUS_CRITERION_ID: True}) is False


def test_entity_loaded_once_per_evaluation() -> None:
    scopes = InMemoryScopeResolver([make_scope(f"scope-{index}") for index in range(4)])
    repository = InMemoryEntityRepository([make_product(1), make_product(10)])
    criterion = status_criterion(StatusProvider(repository), scopes)

    criterion.requires_update(_entity(1, parent_id=10), {STATUS_CRITERION_ID: True})

    assert repository.calls == [1, 10]


def test_missing_entity_propagates() -> None:
    scopes, repository = shirt_catalog()
    criterion = status_criterion(StatusProvider(repository), scopes)

    with pytest.raises(NoSuchEntityError):
        criterion.requires_update(_entity(404), {STATUS_CRITERION_ID: True})


def test_parallel_evaluation_agrees_with_sequential() -> None:
    scopes = InMemoryScopeResolver([make_scope(f"scope-{index}") for index in range(8)])
    repository = InMemoryEntityRepository(
        [make_product(1, scope_signals={"scope-6": ScopeSignals(enabled=False)})]
    )
    provider = StatusProvider(repository)
    sequential = status_criterion(provider, scopes)
    parallel = status_criterion(provider, scopes, max_concurrency=4, timeout_seconds=5)

    for recorded in ({STATUS_CRITERION_ID: True}, {STATUS_CRITERION_ID: False}):
        assert parallel.requires_update(_entity(1), recorded) == sequential.requires_update(
            _entity(1), recorded
        )


def test_criteria_apply_to_products_only() -> None:
    scopes, repository = shirt_catalog()
    criterion = status_criterion(StatusProvider(repository), scopes)

    assert criterion.criterion_id == "status"
    assert criterion.applies_to("product") is True
    assert criterion.applies_to("category") is False


@pytest.mark.parametrize("max_concurrency", [1, 2])
def test_blocked_snapshot_load_times_out(max_concurrency: int) -> None:
    scopes = InMemoryScopeResolver([make_scope("a"), make_scope("b")])
    repository = BlockingEntityRepository([make_product(1)])
    criterion = status_criterion(
        StatusProvider(repository),
        scopes,
        max_concurrency=max_concurrency,
        timeout_seconds=0.05,
    )

    try:
        with pytest.raises(LookupTimeoutError, match="status inputs for entity 1"):
            criterion.requires_update(_entity(1), {STATUS_CRITERION_ID: True})
    finally:
        repository.release.set()

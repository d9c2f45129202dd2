"""Stock-status calculation strategies.

Each :class:`CalculationMethod` maps to one pure function of the scope-resolved
signals of a snapshot. The mapping is closed: adding a method means adding an
enum member and a function here.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from syncgate.domain.errors import UnresolvableCalculationInputError
from syncgate.domain.model import CalculationMethod

if TYPE_CHECKING:
    from syncgate.domain.model import EntitySnapshot, Scope, ScopeSignals

log = getLogger(__name__)

type CalculationStrategy = Callable[[EntitySnapshot, Scope], bool]


def _require_signal(
    signals: ScopeSignals,
    signal: str,
    *,
    method: CalculationMethod,
    snapshot: EntitySnapshot,
    scope: Scope,
) -> bool:
    value: bool | None = getattr(signals, signal)
    if value is None:
        raise UnresolvableCalculationInputError(
            method=method,
            entity_id=snapshot.entity_id,
            scope_id=scope.scope_id,
            signal=signal,
        )
    return value


def from_stock_item(snapshot: EntitySnapshot, scope: Scope) -> bool:
    signals = snapshot.signals_for(scope)
    if signals.stock_item_in_stock is not None:
        return signals.stock_item_in_stock
    # no stock item loaded for the product: the registry is the next best source
    return _require_signal(
        signals,
        "registry_in_stock",
        method=CalculationMethod.STOCK_ITEM,
        snapshot=snapshot,
        scope=scope,
    )


def from_stock_registry(snapshot: EntitySnapshot, scope: Scope) -> bool:
    return _require_signal(
        snapshot.signals_for(scope),
        "registry_in_stock",
        method=CalculationMethod.STOCK_REGISTRY,
        snapshot=snapshot,
        scope=scope,
    )


def from_is_available(snapshot: EntitySnapshot, scope: Scope) -> bool:
    return _require_signal(
        snapshot.signals_for(scope),
        "is_available",
        method=CalculationMethod.IS_AVAILABLE,
        snapshot=snapshot,
        scope=scope,
    )


def from_is_salable(snapshot: EntitySnapshot, scope: Scope) -> bool:
    return _require_signal(
        snapshot.signals_for(scope),
        "is_salable",
        method=CalculationMethod.IS_SALABLE,
        snapshot=snapshot,
        scope=scope,
    )


DEFAULT_STRATEGIES: Mapping[CalculationMethod, CalculationStrategy] = MappingProxyType(
    {
        CalculationMethod.STOCK_ITEM: from_stock_item,
        CalculationMethod.STOCK_REGISTRY: from_stock_registry,
        CalculationMethod.IS_AVAILABLE: from_is_available,
        CalculationMethod.IS_SALABLE: from_is_salable,
    }
)


class CalculationStrategyRegistry:
    """Resolve the configured calculation method and run its strategy."""

    def __init__(
        self,
        strategies: Mapping[CalculationMethod, CalculationStrategy] | None = None,
    ) -> None:
        resolved = dict(DEFAULT_STRATEGIES if strategies is None else strategies)
        missing = [method.value for method in CalculationMethod if method not in resolved]
        if missing:
            raise ValueError(f"No strategy registered for: {', '.join(missing)}")
        self._strategies: Mapping[CalculationMethod, CalculationStrategy] = MappingProxyType(
            resolved
        )

    def resolve(self, config_value: CalculationMethod | str | None) -> CalculationMethod:
        """Normalise a configured value, falling back to the default method."""

        if isinstance(config_value, CalculationMethod):
            return config_value
        normalized = (config_value or "").strip().lower()
        try:
            return CalculationMethod(normalized)
        except ValueError:
            fallback = CalculationMethod.default()
            log.warning(
                "Invalid stock status calculation method %r; falling back to %s",
                config_value,
                fallback.value,
            )
            return fallback

    def compute(
        self,
        method: CalculationMethod,
        snapshot: EntitySnapshot,
        scope: Scope,
        parent: EntitySnapshot | None = None,
    ) -> bool:
        """Run ``method`` for ``snapshot`` in ``scope``.

        A parent whose own signal is negative makes the result negative without
        consulting the child's signal.
        """

        strategy = self._strategies[method]
        if parent is not None and not strategy(parent, scope):
            return False
        return strategy(snapshot, scope)

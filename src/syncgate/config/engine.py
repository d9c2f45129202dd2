"""Engine tuning values: calculation method, fan-out and indexability checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, optional_env_var
from .errors import ConfigurationError

DEFAULT_CALCULATION_METHOD: Final[str] = "stock_item"
DEFAULT_MAX_CONCURRENCY: Final[int] = 1


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Holds the values the engine reads once at assembly time.

    ``calculation_method`` is kept as the raw configured string; the strategy
    registry normalises it so that stale values never break indexing.
    """

    calculation_method: str | None = DEFAULT_CALCULATION_METHOD
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    lookup_timeout_seconds: float | None = None
    exclude_disabled: bool = False
    exclude_out_of_stock: bool = False

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ConfigurationError("max_concurrency must be >= 1")
        if self.lookup_timeout_seconds is not None and self.lookup_timeout_seconds <= 0:
            raise ConfigurationError("lookup_timeout_seconds must be > 0")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer for {name}: {value!r}") from exc


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid number for {name}: {value!r}") from exc


def get_engine_config() -> EngineConfig:
    concurrency = optional_env_var("SYNCGATE_MAX_CONCURRENCY")
    timeout = optional_env_var("SYNCGATE_LOOKUP_TIMEOUT_SECONDS")
    return EngineConfig(
        calculation_method=optional_env_var("SYNCGATE_STOCK_STATUS_CALCULATION_METHOD")
        or DEFAULT_CALCULATION_METHOD,
        max_concurrency=(
            _parse_int("SYNCGATE_MAX_CONCURRENCY", concurrency)
            if concurrency is not None
            else DEFAULT_MAX_CONCURRENCY
        ),
        lookup_timeout_seconds=(
            _parse_float("SYNCGATE_LOOKUP_TIMEOUT_SECONDS", timeout)
            if timeout is not None
            else None
        ),
        exclude_disabled=env_flag("SYNCGATE_EXCLUDE_DISABLED_PRODUCTS"),
        exclude_out_of_stock=env_flag("SYNCGATE_EXCLUDE_OOS_PRODUCTS"),
    )

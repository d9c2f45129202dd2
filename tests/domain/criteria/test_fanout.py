from __future__ import annotations

import threading

import pytest

from syncgate.domain.criteria import any_scope_diverges, run_with_deadline
from syncgate.domain.errors import LookupTimeoutError
from syncgate.domain.model import Scope
from tests.helpers.catalog import make_scope


def _scopes(*scope_ids: str) -> list[Scope]:
    return [make_scope(scope_id) for scope_id in scope_ids]


def test_rejects_non_positive_concurrency() -> None:
    with pytest.raises(ValueError, match="max_concurrency"):
        any_scope_diverges(_scopes("a"), lambda _scope: True, expected=True, max_concurrency=0)


def test_no_scopes_never_diverge() -> None:
    calls: list[str] = []

    def compute(scope: Scope) -> bool:
        calls.append(scope.scope_id)
        return False

    assert any_scope_diverges([], compute, expected=True) is False
    assert calls == []


def test_sequential_scan_stops_at_first_divergence() -> None:
    calls: list[str] = []

    def compute(scope: Scope) -> bool:
        calls.append(scope.scope_id)
        return scope.scope_id != "b"

    assert any_scope_diverges(_scopes("a", "b", "c"), compute, expected=True) is True
    assert calls == ["a", "b"]


def test_sequential_scan_visits_every_scope_when_all_match() -> None:
    calls: list[str] = []

    def compute(scope: Scope) -> bool:
        calls.append(scope.scope_id)
        return True

    assert any_scope_diverges(_scopes("a", "b", "c"), compute, expected=True) is False
    assert calls == ["a", "b", "c"]


@pytest.mark.parametrize(("diverging", "expected"), [({"c"}, True), (set[str](), False)])
def test_concurrent_scan_matches_sequential_result(
    diverging: set[str],
    expected: bool,  # noqa: FBT001
) -> None:
    def compute(scope: Scope) -> bool:
        return scope.scope_id not in diverging

    result = any_scope_diverges(
        _scopes("a", "b", "c", "d"),
        compute,
        expected=True,
        max_concurrency=3,
    )

    assert result is expected


def test_concurrent_scan_times_out() -> None:
    release = threading.Event()

    def compute(_scope: Scope) -> bool:
        release.wait(timeout=5)
        return True

    try:
        with pytest.raises(LookupTimeoutError) as exc_info:
            any_scope_diverges(
                _scopes("a", "b"),
                compute,
                expected=True,
                max_concurrency=2,
                timeout_seconds=0.05,
            )
    finally:
        release.set()

    assert exc_info.value.timeout_seconds == 0.05


def test_collaborator_timeout_propagates_unchanged() -> None:
    original = LookupTimeoutError("get_by_id(1)")

    def compute(_scope: Scope) -> bool:
        raise original

    with pytest.raises(LookupTimeoutError) as exc_info:
        any_scope_diverges(_scopes("a", "b"), compute, expected=True, max_concurrency=2)

    assert exc_info.value is original


def test_builtin_timeout_from_computation_is_not_translated() -> None:
    def compute(_scope: Scope) -> bool:
        raise TimeoutError("socket read timed out")

    with pytest.raises(TimeoutError, match="socket read") as exc_info:
        any_scope_diverges(
            _scopes("a", "b"),
            compute,
            expected=True,
            max_concurrency=2,
            timeout_seconds=5,
        )

    assert not isinstance(exc_info.value, LookupTimeoutError)


def test_deadline_runs_inline_without_timeout() -> None:
    caller = threading.current_thread()

    def fn() -> bool:
        return threading.current_thread() is caller

    assert run_with_deadline(fn, operation="inline", timeout_seconds=None) is True


def test_deadline_returns_result_in_time() -> None:
    assert run_with_deadline(lambda: 42, operation="answer", timeout_seconds=5) == 42


def test_deadline_abandons_blocked_call() -> None:
    release = threading.Event()

    try:
        with pytest.raises(LookupTimeoutError, match="get_by_id") as exc_info:
            run_with_deadline(
                lambda: release.wait(timeout=5),
                operation="get_by_id(1)",
                timeout_seconds=0.05,
            )
    finally:
        release.set()

    assert exc_info.value.operation == "get_by_id(1)"


def test_deadline_propagates_errors_unchanged() -> None:
    def fn() -> bool:
        raise TimeoutError("socket read timed out")

    with pytest.raises(TimeoutError, match="socket read") as exc_info:
        run_with_deadline(fn, operation="load", timeout_seconds=5)

    assert not isinstance(exc_info.value, LookupTimeoutError)

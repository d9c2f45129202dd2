"""Scan scopes for a divergent state and bound lookups by a deadline."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed, wait
from typing import TYPE_CHECKING

from syncgate.domain.errors import LookupTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from syncgate.domain.model import Scope


def any_scope_diverges(
    scopes: Sequence[Scope],
    compute: Callable[[Scope], bool],
    *,
    expected: bool,
    max_concurrency: int = 1,
    timeout_seconds: float | None = None,
) -> bool:
    """Return ``True`` as soon as one scope computes a value other than ``expected``.

    With ``max_concurrency == 1`` and no timeout the scan runs inline in scope
    order. Otherwise scopes are submitted to a pool of at most
    ``max_concurrency`` workers; the first divergent result wins and pending
    computations are cancelled.
    """

    if max_concurrency < 1:
        raise ValueError("max_concurrency must be >= 1")
    if not scopes:
        return False
    if max_concurrency == 1 and timeout_seconds is None:
        return any(compute(scope) != expected for scope in scopes)
    return _scan_concurrently(
        scopes,
        compute,
        expected=expected,
        max_workers=min(max_concurrency, len(scopes)),
        timeout_seconds=timeout_seconds,
    )


def run_with_deadline[T](
    fn: Callable[[], T],
    *,
    operation: str,
    timeout_seconds: float | None,
) -> T:
    """Run ``fn`` and give up with ``LookupTimeoutError`` once the deadline passes.

    Without a timeout ``fn`` runs inline. A call that overruns keeps running on
    its worker thread; its result is discarded.
    """

    if timeout_seconds is None:
        return fn()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="syncgate-lookup")
    future = executor.submit(fn)
    try:
        done, _ = wait([future], timeout=timeout_seconds)
        if not done:
            raise LookupTimeoutError(operation, timeout_seconds)
        return future.result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def _scan_concurrently(
    scopes: Sequence[Scope],
    compute: Callable[[Scope], bool],
    *,
    expected: bool,
    max_workers: int,
    timeout_seconds: float | None,
) -> bool:
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="syncgate-scope")
    futures = [executor.submit(compute, scope) for scope in scopes]
    try:
        completed = as_completed(futures, timeout=timeout_seconds)
        while True:
            try:
                future = next(completed)
            except StopIteration:
                return False
            except TimeoutError as exc:
                raise LookupTimeoutError(
                    f"state computation for {len(scopes)} scope(s)",
                    timeout_seconds,
                ) from exc
            # errors raised by compute itself propagate unchanged
            if future.result() != expected:
                return True
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

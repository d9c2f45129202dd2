"""Reconciliation of computed states across related targets."""

from __future__ import annotations

from .reconciler import ConflictReconciler, ReconciliationResult, reconcile_states
from .stock_targets import StockStatusTargetGrouper, TargetKeysByState

__all__ = [
    "ConflictReconciler",
    "ReconciliationResult",
    "StockStatusTargetGrouper",
    "TargetKeysByState",
    "reconcile_states",
]

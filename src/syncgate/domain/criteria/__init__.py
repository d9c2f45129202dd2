"""Requires-update criteria and their registry."""

from __future__ import annotations

from .contracts import (
    STATUS_CRITERION_ID,
    STOCK_STATUS_CRITERION_ID,
    RecordedCriteriaValues,
    RequiresUpdateCriterion,
)
from .evaluators import ProviderCriterion, status_criterion, stock_status_criterion
from .fanout import any_scope_diverges, run_with_deadline
from .registry import CriteriaRegistry

__all__ = [
    "STATUS_CRITERION_ID",
    "STOCK_STATUS_CRITERION_ID",
    "CriteriaRegistry",
    "ProviderCriterion",
    "RecordedCriteriaValues",
    "RequiresUpdateCriterion",
    "any_scope_diverges",
    "run_with_deadline",
    "status_criterion",
    "stock_status_criterion",
]

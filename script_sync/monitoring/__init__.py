"""
모니터링 시스템

Prometheus 메트릭을 제공합니다.
"""

from .metrics import (
    COMPARISONS,
    FETCH_ERRORS,
    REGISTRY,
    SYNC_DURATION,
    SYNC_ITEMS,
    get_metrics_summary,
    observe_sync_duration,
    record_comparison,
    record_fetch_error,
    record_sync_item,
)

__all__ = [
    "REGISTRY",
    "SYNC_ITEMS",
    "SYNC_DURATION",
    "FETCH_ERRORS",
    "COMPARISONS",
    "get_metrics_summary",
    "observe_sync_duration",
    "record_comparison",
    "record_fetch_error",
    "record_sync_item",
]

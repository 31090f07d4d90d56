"""
Prometheus 메트릭 모듈

동기화 및 비교 작업의 처리량과 오류를 수집하고 노출합니다.
"""

import platform
import sys
import time
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, Info

from ..utils.logging import get_logger

# 메트릭 레지스트리
REGISTRY = CollectorRegistry()

logger = get_logger(__name__)

# 동기화 관련 메트릭
SYNC_ITEMS = Counter(
    'script_sync_items_total',
    '저장소별 메타데이터 처리 항목 수',
    ['source', 'status'],
    registry=REGISTRY
)

SYNC_DURATION = Histogram(
    'script_sync_duration_seconds',
    '동기화 처리 시간 (초)',
    ['scope'],
    registry=REGISTRY
)

LAST_SYNC_TIMESTAMP = Gauge(
    'script_sync_last_run_timestamp',
    '마지막 전체 동기화 완료 시각 (유닉스 시간)',
    registry=REGISTRY
)

# 오류 관련 메트릭
FETCH_ERRORS = Counter(
    'script_sync_fetch_errors_total',
    '원격 조회 오류 수',
    ['kind'],
    registry=REGISTRY
)

# 비교 관련 메트릭
COMPARISONS = Counter(
    'script_sync_comparisons_total',
    '로컬/원격 파일 비교 수',
    ['result'],
    registry=REGISTRY
)

# 시스템 정보
SYSTEM_INFO = Info(
    'script_sync_info',
    '스크립트 동기화 시스템 정보',
    registry=REGISTRY
)

SYSTEM_INFO.info({
    'version': '1.0.0',
    'python_version': f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
    'platform': platform.system()
})


def record_sync_item(source: str, status: str, amount: int = 1) -> None:
    """
    동기화 항목 처리 기록

    Args:
        source: 저장소 식별자
        status: 처리 결과 (synced, skipped, failed)
        amount: 항목 수
    """
    if amount <= 0:
        return
    SYNC_ITEMS.labels(source=source, status=status).inc(amount)


def record_fetch_error(kind: str) -> None:
    """
    원격 조회 오류 기록

    Args:
        kind: 오류 종류 (rate_limited, fetch_failed, parse_failed)
    """
    FETCH_ERRORS.labels(kind=kind).inc()
    logger.debug(f"원격 조회 오류 기록: {kind}")


def record_comparison(result: str) -> None:
    """
    파일 비교 결과 기록

    Args:
        result: 비교 결과 (identical, different, error)
    """
    COMPARISONS.labels(result=result).inc()


def observe_sync_duration(scope: str, seconds: float) -> None:
    """
    동기화 처리 시간 기록

    Args:
        scope: 범위 (all, source)
        seconds: 소요 시간 (초)
    """
    SYNC_DURATION.labels(scope=scope).observe(seconds)
    if scope == "all":
        LAST_SYNC_TIMESTAMP.set(time.time())


def _sum_samples(metric_name: str, label: str) -> dict[str, float]:
    """카운터 샘플을 라벨 값별로 합산"""
    totals: dict[str, float] = {}
    for metric in REGISTRY.collect():
        for sample in metric.samples:
            if sample.name != metric_name:
                continue
            key = sample.labels.get(label, "")
            totals[key] = totals.get(key, 0.0) + sample.value
    return totals


def get_metrics_summary() -> dict[str, Any]:
    """
    메트릭 요약 정보 반환

    Returns:
        메트릭 요약 딕셔너리
    """
    return {
        "sync_items": _sum_samples("script_sync_items_total", "status"),
        "fetch_errors": _sum_samples("script_sync_fetch_errors_total", "kind"),
        "comparisons": _sum_samples("script_sync_comparisons_total", "result"),
        "last_sync_timestamp": REGISTRY.get_sample_value("script_sync_last_run_timestamp"),
        "timestamp": time.time()
    }

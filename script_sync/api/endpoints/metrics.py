"""
메트릭 엔드포인트 모듈

Prometheus 메트릭을 HTTP 엔드포인트로 노출합니다.
"""

from typing import Any, Dict

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ...monitoring.metrics import REGISTRY, get_metrics_summary
from ...utils.logging import get_logger

logger = get_logger(__name__)

# 메트릭 라우터
metrics_router = APIRouter()


@metrics_router.get("/metrics", tags=["Monitoring"])
async def get_prometheus_metrics():
    """
    Prometheus 메트릭 노출

    Returns:
        Prometheus 형식의 메트릭
    """
    metrics_data = generate_latest(REGISTRY)
    logger.debug("Prometheus 메트릭 생성 완료")

    return Response(
        content=metrics_data,
        media_type=CONTENT_TYPE_LATEST
    )


@metrics_router.get("/metrics/summary", tags=["Monitoring"])
async def get_metrics_summary_endpoint() -> Dict[str, Any]:
    """
    메트릭 요약 정보

    Returns:
        메트릭 요약 딕셔너리
    """
    return get_metrics_summary()

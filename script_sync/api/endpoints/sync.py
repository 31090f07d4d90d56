"""
동기화 엔드포인트 모듈

저장소 동기화와 저장소 삭제 시 메타데이터 정리를 HTTP로 노출합니다.
"""

from fastapi import APIRouter, Depends, Query

from ...models.base import SyncReport
from ...scripts.downloader import ScriptDownloader
from ...scripts.registry import validate_repository_url
from ...utils.logging import get_logger
from ..dependencies import get_downloader
from ..models import RemoveSourceResponse, SyncSourceRequest

logger = get_logger(__name__)

sync_router = APIRouter()


@sync_router.post("/sync", response_model=SyncReport, tags=["Sync"])
async def sync_all_sources(downloader: ScriptDownloader = Depends(get_downloader)):
    """
    활성화된 모든 저장소 동기화

    Returns:
        전체 동기화 결과 ({success, message, count, syncedKeys})
    """
    logger.info("전체 동기화 요청 수신")
    return await downloader.sync_all()


@sync_router.post("/sync/source", response_model=SyncReport, tags=["Sync"])
async def sync_single_source(
    request: SyncSourceRequest,
    downloader: ScriptDownloader = Depends(get_downloader)
):
    """
    단일 저장소 동기화

    Args:
        request: 동기화할 저장소 정보

    Returns:
        저장소 동기화 결과
    """
    logger.info(f"저장소 동기화 요청 수신: {request.identifier}")
    return await downloader.sync_one(request.identifier)


@sync_router.delete("/sources", response_model=RemoveSourceResponse, tags=["Sync"])
async def remove_source(
    identifier: str = Query(..., description="삭제된 저장소 URL"),
    downloader: ScriptDownloader = Depends(get_downloader)
):
    """
    삭제된 저장소에서 온 메타데이터 정리

    Args:
        identifier: 저장소 URL

    Returns:
        삭제된 메타데이터 파일 목록
    """
    identifier = validate_repository_url(identifier)
    removed = downloader.remove_source(identifier)
    return RemoveSourceResponse(identifier=identifier, removed_files=removed, count=len(removed))

"""
스크립트 엔드포인트 모듈

로컬 스크립트 목록 조회, 에셋 다운로드/삭제, 로컬/원격 비교를 HTTP로 노출합니다.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from ...models.base import (
    AssetLoadResult,
    ComparisonResult,
    DeleteResult,
    ScriptDiff,
    ScriptFilesStatus,
)
from ...scripts.downloader import ScriptDownloader
from ..dependencies import get_downloader
from ..models import ScriptListResponse

scripts_router = APIRouter(prefix="/scripts", tags=["Scripts"])


@scripts_router.get("", response_model=ScriptListResponse)
async def list_scripts(downloader: ScriptDownloader = Depends(get_downloader)):
    """로컬 스크립트 요약 목록"""
    cards = downloader.list_script_cards()
    return ScriptListResponse(scripts=cards, total=len(cards))


@scripts_router.get("/{slug}")
async def get_script(slug: str, downloader: ScriptDownloader = Depends(get_downloader)) -> Dict[str, Any]:
    """
    슬러그로 메타데이터 조회

    로컬에 없으면 활성화된 저장소들을 우선순위 순서로 조회합니다.
    """
    record = await downloader.require_script(slug)
    return record.to_document()


@scripts_router.post("/{slug}/load", response_model=AssetLoadResult)
async def load_script(slug: str, downloader: ScriptDownloader = Depends(get_downloader)):
    """스크립트 에셋 다운로드"""
    return await downloader.load_script(slug)


@scripts_router.get("/{slug}/status", response_model=ScriptFilesStatus)
async def get_script_status(slug: str, downloader: ScriptDownloader = Depends(get_downloader)):
    """로컬 에셋 존재 여부"""
    return await downloader.check_script_exists(slug)


@scripts_router.delete("/{slug}/files", response_model=DeleteResult)
async def delete_script_files(slug: str, downloader: ScriptDownloader = Depends(get_downloader)):
    """로컬 에셋 삭제"""
    return await downloader.delete_script(slug)


@scripts_router.get("/{slug}/compare", response_model=ComparisonResult)
async def compare_script(slug: str, downloader: ScriptDownloader = Depends(get_downloader)):
    """로컬 에셋과 원격 내용 비교"""
    return await downloader.compare_script(slug)


@scripts_router.get("/{slug}/diff", response_model=ScriptDiff)
async def get_script_diff(
    slug: str,
    file_path: str = Query(..., description="파일 경로 (예: ct/redis.sh)"),
    downloader: ScriptDownloader = Depends(get_downloader)
):
    """파일 하나의 로컬/원격 diff"""
    return await downloader.get_script_diff(slug, file_path)

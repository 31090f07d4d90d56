"""
API 의존성 모듈
"""

from fastapi import HTTPException, Request, status

from ..scripts.downloader import ScriptDownloader


def get_downloader(request: Request) -> ScriptDownloader:
    """앱 상태에 보관된 스크립트 동기화 인스턴스"""
    downloader = getattr(request.app.state, "downloader", None)
    if downloader is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="스크립트 동기화 서비스가 아직 초기화되지 않았습니다"
        )
    return downloader

"""
API 요청/응답 모델 모듈

FastAPI용 Pydantic 모델들을 정의합니다.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..exceptions import InvalidSourceIdentifierException
from ..models.base import ScriptCard
from ..scripts.registry import validate_repository_url


class SyncSourceRequest(BaseModel):
    """단일 저장소 동기화 요청 모델"""

    identifier: str = Field(
        ...,
        description="저장소 URL (https://github.com/owner/repo)",
        min_length=1
    )

    @field_validator('identifier')
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """저장소 URL 유효성 검사"""
        try:
            return validate_repository_url(v)
        except InvalidSourceIdentifierException as e:
            raise ValueError(e.message) from e


class RemoveSourceResponse(BaseModel):
    """저장소 메타데이터 삭제 응답 모델"""

    identifier: str = Field(..., description="삭제된 저장소 URL")
    removed_files: List[str] = Field(default_factory=list, description="삭제된 메타데이터 파일")
    count: int = Field(..., description="삭제된 파일 수")


class ScriptListResponse(BaseModel):
    """스크립트 목록 응답 모델"""

    scripts: List[ScriptCard] = Field(..., description="스크립트 요약 목록")
    total: int = Field(..., description="전체 스크립트 수")


class HealthCheckResponse(BaseModel):
    """헬스 체크 응답 모델"""

    status: str = Field(..., description="서비스 상태")
    timestamp: datetime = Field(..., description="체크 시간")
    components: Dict[str, str] = Field(..., description="컴포넌트 상태")
    version: str = Field(..., description="API 버전")


class ErrorResponse(BaseModel):
    """오류 응답 모델"""

    error: str = Field(..., description="오류 메시지")
    detail: Optional[str] = Field(default=None, description="상세 오류 정보")
    code: Optional[str] = Field(default=None, description="오류 코드")
    timestamp: datetime = Field(default_factory=datetime.now, description="오류 발생 시간")

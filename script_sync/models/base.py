"""
기본 데이터 모델 모듈

스크립트 동기화 시스템의 핵심 데이터 구조들을 정의합니다.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import AssetCategory


class AssetReference(BaseModel):
    """메타데이터에 선언된 에셋 참조 (원격 JSON의 install_methods 항목)"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    path: Optional[str] = Field(
        default=None,
        alias="script",
        description="저장소 기준 상대 경로 (예: ct/redis.sh)"
    )
    variant: str = Field(
        default="default",
        alias="type",
        description="변형 종류 (default, alpine 등)"
    )

    @property
    def is_primary(self) -> bool:
        """기본 카테고리(ct/) 경로 여부"""
        return bool(self.path) and self.path.startswith(f"{AssetCategory.PRIMARY.value}/")


class ScriptRecord(BaseModel):
    """
    스크립트 메타데이터 레코드

    원격 JSON 문서의 알려지지 않은 필드는 그대로 보존되어 다시 저장됩니다.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    slug: str = Field(
        ...,
        description="시스템 전체에서 유일한 스크립트 식별자",
        min_length=1
    )
    name: str = Field(
        default="",
        description="스크립트 이름"
    )
    description: Optional[str] = Field(
        default=None,
        description="스크립트 설명"
    )
    script_type: Optional[str] = Field(
        default=None,
        alias="type",
        description="스크립트 타입 (ct, vm, pve, addon 등)"
    )
    asset_references: list[AssetReference] = Field(
        default_factory=list,
        alias="install_methods",
        description="선언된 에셋 경로 목록 (순서 유지)"
    )
    source_origin: Optional[str] = Field(
        default=None,
        alias="repository_url",
        description="마지막으로 동기화된 저장소 URL"
    )

    @property
    def has_primary_asset(self) -> bool:
        """기본 카테고리 에셋 보유 여부"""
        return any(ref.is_primary for ref in self.asset_references)

    @property
    def has_alpine_primary_variant(self) -> bool:
        """alpine 변형의 기본 카테고리 에셋 보유 여부"""
        return any(
            ref.variant == "alpine" and ref.is_primary
            for ref in self.asset_references
        )

    def to_document(self) -> Dict[str, Any]:
        """저장용 JSON 문서 생성 (원본 필드 이름 사용)"""
        document = self.model_dump(by_alias=True, exclude_unset=True)
        document["repository_url"] = self.source_origin
        return document


class RemoteEntry(BaseModel):
    """원격 디렉토리 목록 항목"""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="파일 이름")
    path: str = Field(..., description="저장소 기준 경로")


class SourceDescriptor(BaseModel):
    """원격 저장소 정보 (외부 저장소 레지스트리 소유, 읽기 전용)"""

    identifier: str = Field(
        ...,
        description="저장소 URL (https://github.com/owner/repo)"
    )
    enabled: bool = Field(
        default=True,
        description="활성화 여부"
    )
    priority: int = Field(
        default=1,
        description="우선순위 (낮을수록 우선)"
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="등록 시간"
    )

    def sort_key(self) -> tuple:
        """처리 순서 정렬 키 (우선순위, 등록 시간)"""
        return (self.priority, self.created_at)


class SyncReport(BaseModel):
    """동기화 결과 보고서"""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(..., description="성공 여부")
    message: str = Field(default="", description="결과 메시지")
    count: int = Field(default=0, description="동기화된 파일 수", ge=0)
    synced_keys: list[str] = Field(
        default_factory=list,
        alias="syncedKeys",
        description="동기화된 메타데이터 파일 이름 목록"
    )
    errors: Dict[str, str] = Field(
        default_factory=dict,
        description="저장소별 오류 메시지"
    )
    listed_keys: list[str] = Field(
        default_factory=list,
        exclude=True,
        description="원격 목록에서 확인된 슬러그 (내부용)"
    )


class ScriptCard(BaseModel):
    """스크립트 요약 카드"""

    name: str
    slug: str
    description: Optional[str] = None
    script_type: Optional[str] = None
    source_origin: Optional[str] = None


class AssetLoadResult(BaseModel):
    """에셋 다운로드 결과"""

    success: bool
    message: str = ""
    files: list[str] = Field(default_factory=list)


class ScriptFilesStatus(BaseModel):
    """로컬 에셋 존재 여부"""

    primary_exists: bool = False
    install_exists: bool = False
    files: list[str] = Field(default_factory=list)


class DeleteResult(BaseModel):
    """에셋 삭제 결과"""

    success: bool
    message: str = ""
    deleted_files: list[str] = Field(default_factory=list)


class FileComparison(BaseModel):
    """단일 파일 비교 결과"""

    file_path: str
    has_differences: bool = False
    error: Optional[str] = None


class ComparisonResult(BaseModel):
    """스크립트 전체 비교 결과"""

    has_differences: bool = False
    differences: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class ScriptDiff(BaseModel):
    """로컬/원격 diff 결과"""

    diff: Optional[str] = None
    local_content: Optional[str] = None
    remote_content: Optional[str] = None
    error: Optional[str] = None

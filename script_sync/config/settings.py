"""
설정 관리 모듈

환경 변수를 통한 시스템 설정을 관리합니다.
"""

import os
import re
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from ..exceptions import ConfigurationException
from ..models.base import SourceDescriptor
from ..models.enums import SourceBackendType

DEFAULT_REPOSITORY_URL = "https://github.com/community-scripts/ProxmoxVE"

GITHUB_REPOSITORY_PATTERN = re.compile(r"^https://github\.com/[^/]+/[^/]+$")


class Settings(BaseSettings):
    """시스템 설정 관리 클래스"""

    # 원격 저장소 설정
    repo_branch: str = Field(
        default="main",
        description="목록 조회 및 원본 다운로드에 사용할 브랜치"
    )
    json_folder: str = Field(
        default="frontend/public/json",
        description="원격 저장소의 메타데이터 폴더"
    )
    metadata_extension: str = Field(
        default=".json",
        description="메타데이터 파일 확장자"
    )
    default_repository_url: str = Field(
        default=DEFAULT_REPOSITORY_URL,
        description="source_origin이 없는 레거시 레코드에 채울 기본 저장소 URL"
    )
    repositories: list[SourceDescriptor] = Field(
        default_factory=lambda: [SourceDescriptor(identifier=DEFAULT_REPOSITORY_URL, priority=1)],
        description="동기화 대상 저장소 목록 (JSON)"
    )
    source_backend: SourceBackendType = Field(
        default=SourceBackendType.GITHUB,
        description="원격 저장소 클라이언트 타입"
    )

    # GitHub 설정
    github_token: Optional[str] = Field(
        default=None,
        description="GitHub 액세스 토큰 (요청 한도 완화용)"
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub API 기본 URL"
    )
    github_raw_url: str = Field(
        default="https://raw.githubusercontent.com",
        description="GitHub 원본 파일 기본 URL"
    )
    user_agent: str = Field(
        default="ScriptSync/1.0",
        description="HTTP User-Agent 헤더"
    )
    request_timeout: int = Field(
        default=30,
        description="HTTP 요청 타임아웃 (초)"
    )

    # Git 백엔드 설정
    git_checkout_dir: str = Field(
        default="./cache/sources",
        description="Git 백엔드 작업 사본 디렉토리"
    )

    # 로컬 저장소 설정
    scripts_dir: str = Field(
        default="./scripts",
        description="로컬 스크립트 저장소 루트"
    )

    # 동기화/비교 설정
    max_concurrent_downloads: int = Field(
        default=8,
        description="저장소별 동시 다운로드 및 파일 비교 최대 수",
        ge=1
    )
    diff_lookahead: int = Field(
        default=10,
        description="diff 재동기화 탐색 창 크기 (줄)",
        ge=1
    )
    bootstrap_helper_path: str = Field(
        default="../core/build.func",
        description="기본 카테고리 스크립트가 원격 대신 불러올 로컬 헬퍼 경로"
    )

    # 로깅 설정
    log_level: str = Field(
        default="INFO",
        description="로그 레벨"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="로그 포맷"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="로그 파일 경로"
    )
    log_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="로그 파일 교체 크기 (바이트)"
    )
    log_backup_count: int = Field(
        default=5,
        description="보관할 이전 로그 파일 수"
    )

    # API 설정
    api_host: str = Field(
        default="0.0.0.0",
        description="API 서버 호스트"
    )
    api_port: int = Field(
        default=8000,
        description="API 서버 포트"
    )
    api_reload: bool = Field(
        default=False,
        description="API 서버 자동 재로드 (개발용)"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        # 환경 변수 이름 대소문자 무시
        case_sensitive = False

    def validate_configuration(self) -> None:
        """설정 유효성 검증"""
        if not self.repositories:
            raise ConfigurationException(
                "REPOSITORIES", "최소 하나의 저장소가 필요합니다"
            )

        for descriptor in self.repositories:
            if not GITHUB_REPOSITORY_PATTERN.match(descriptor.identifier):
                raise ConfigurationException(
                    "REPOSITORIES",
                    f"유효하지 않은 GitHub 저장소 URL입니다: {descriptor.identifier}"
                )

        if not self.metadata_extension.startswith("."):
            raise ConfigurationException(
                "METADATA_EXTENSION", "확장자는 '.'으로 시작해야 합니다"
            )

        # 로컬 저장소 디렉토리 생성
        os.makedirs(self.scripts_dir, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """
    설정 인스턴스를 반환합니다 (싱글톤 패턴)

    Returns:
        Settings: 설정 인스턴스
    """
    settings = Settings()
    settings.validate_configuration()
    return settings

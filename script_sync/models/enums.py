"""
열거형 정의 모듈

스크립트 동기화 시스템에서 사용되는 상수 값들을 열거형으로 정의합니다.
"""

from enum import Enum


class SourceBackendType(Enum):
    """원격 저장소 클라이언트 타입 열거형"""
    GITHUB = "github"
    GIT = "git"


class AssetCategory(Enum):
    """에셋 카테고리 열거형 (값은 원격 경로 접두사이자 로컬 디렉토리 이름)"""
    PRIMARY = "ct"
    TOOLS = "tools"
    VM = "vm"
    INSTALL = "install"


class SyncItemStatus(Enum):
    """동기화 항목 처리 결과 열거형"""
    SYNCED = "synced"
    SKIPPED = "skipped"
    FAILED = "failed"

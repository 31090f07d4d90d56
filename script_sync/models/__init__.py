"""
데이터 모델 패키지

스크립트 동기화 시스템의 핵심 데이터 모델들을 정의합니다.
"""

from .base import (
    AssetReference,
    ComparisonResult,
    RemoteEntry,
    ScriptDiff,
    ScriptRecord,
    SourceDescriptor,
    SyncReport,
)
from .enums import AssetCategory, SourceBackendType, SyncItemStatus

__all__ = [
    "AssetReference",
    "ComparisonResult",
    "RemoteEntry",
    "ScriptDiff",
    "ScriptRecord",
    "SourceDescriptor",
    "SyncReport",
    "AssetCategory",
    "SourceBackendType",
    "SyncItemStatus",
]

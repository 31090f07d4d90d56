"""
스크립트 동기화 모듈

여러 원격 저장소의 메타데이터와 에셋을 로컬 저장소로 미러링하고, 로컬/원격
내용을 비교하는 기능을 제공합니다.
"""

from .assets import AssetManager
from .cache_manager import MetadataCache
from .comparison import ContentComparator
from .diff import generate_diff
from .downloader import ScriptDownloader, diff_script, sync_all_sources, sync_source
from .metadata import MetadataParser
from .registry import (
    RepositoryProvider,
    SettingsRepositoryProvider,
    StaticRepositoryProvider,
    validate_repository_url,
)
from .repository import GitHubRepository, GitRepository, RepositoryBase
from .resolver import AssetPathResolver
from .rewrite import rewrite_bootstrap
from .store import LocalArtifactStore
from .sync import SyncOrchestrator, SyncPlanner

__all__ = [
    "AssetManager",
    "AssetPathResolver",
    "ContentComparator",
    "GitHubRepository",
    "GitRepository",
    "LocalArtifactStore",
    "MetadataCache",
    "MetadataParser",
    "RepositoryBase",
    "RepositoryProvider",
    "ScriptDownloader",
    "SettingsRepositoryProvider",
    "StaticRepositoryProvider",
    "SyncOrchestrator",
    "SyncPlanner",
    "diff_script",
    "generate_diff",
    "rewrite_bootstrap",
    "sync_all_sources",
    "sync_source",
    "validate_repository_url",
]

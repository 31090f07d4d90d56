"""
스크립트 동기화 통합 모듈

저장소 동기화, 메타데이터 조회, 에셋 다운로드와 비교 기능을 하나로 묶는
메인 인터페이스를 제공합니다.
"""

from typing import Optional

from ..config.settings import Settings
from ..exceptions import FetchFailedException, ParseFailedException, ScriptNotFoundException
from ..models.base import (
    AssetLoadResult,
    ComparisonResult,
    DeleteResult,
    ScriptCard,
    ScriptDiff,
    ScriptFilesStatus,
    ScriptRecord,
    SyncReport,
)
from ..models.enums import SourceBackendType
from ..utils.logging import get_logger
from .assets import AssetManager
from .cache_manager import MetadataCache
from .comparison import ContentComparator
from .metadata import MetadataParser
from .registry import RepositoryProvider, SettingsRepositoryProvider
from .repository import GitHubRepository, GitRepository, RepositoryBase
from .store import LocalArtifactStore
from .sync import SyncOrchestrator

logger = get_logger(__name__)


class ScriptDownloader:
    """스크립트 동기화 통합 인터페이스"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[RepositoryBase] = None,
        provider: Optional[RepositoryProvider] = None
    ):
        """
        통합 인터페이스 초기화

        Args:
            settings: 시스템 설정 (None이면 기본 설정 사용)
            client: 원격 저장소 클라이언트 (None이면 설정에 따라 생성)
            provider: 저장소 공급자 (None이면 설정 기반 공급자)
        """
        if settings is None:
            from ..config.settings import get_settings
            settings = get_settings()

        self.settings = settings
        self.logger = logger

        self.store = LocalArtifactStore(
            settings.scripts_dir,
            settings.metadata_extension,
            MetadataParser(settings)
        )
        self.cache = MetadataCache(self.store, settings.default_repository_url)
        self.provider = provider or SettingsRepositoryProvider(settings)
        self.repository = client or self._create_repository()

        self.orchestrator = SyncOrchestrator(
            self.provider, self.repository, self.store, self.cache, settings
        )
        self.assets = AssetManager(self.repository, self.store, settings)
        self.comparator = ContentComparator(self.assets, settings)

        self.logger.info(f"스크립트 동기화 초기화 완료: {settings.source_backend.value}")

    def _create_repository(self) -> RepositoryBase:
        """설정에 따른 원격 저장소 클라이언트 생성"""
        backend = self.settings.source_backend

        if backend == SourceBackendType.GITHUB:
            return GitHubRepository(self.settings)
        elif backend == SourceBackendType.GIT:
            return GitRepository(self.settings)
        else:
            raise ValueError(f"지원하지 않는 저장소 타입: {backend}")

    # 동기화

    async def sync_all(self) -> SyncReport:
        """활성화된 모든 저장소 동기화"""
        return await self.orchestrator.sync_all()

    async def sync_one(self, source_identifier: str) -> SyncReport:
        """단일 저장소 동기화"""
        return await self.orchestrator.sync_one(source_identifier)

    def remove_source(self, source_identifier: str) -> list[str]:
        """삭제된 저장소에서 온 메타데이터 제거"""
        return self.orchestrator.remove_source_records(source_identifier)

    # 조회

    async def get_script_by_slug(self, slug: str, source: Optional[str] = None) -> Optional[ScriptRecord]:
        """
        슬러그로 메타데이터 조회

        로컬(캐시) 레코드를 먼저 확인하고, 없으면 지정한 저장소 또는 활성화된
        저장소들을 우선순위 순서로 조회합니다. 원격에서 찾은 레코드는 로컬에
        저장하지 않습니다.

        Args:
            slug: 스크립트 슬러그
            source: 특정 저장소 URL (선택사항)

        Returns:
            메타데이터 레코드 (어디에도 없으면 None)
        """
        record = self.cache.get(slug)
        if record is not None and (source is None or record.source_origin == source):
            return record

        sources = [source] if source else [d.identifier for d in self.provider.list_enabled()]
        remote_path = f"{self.settings.json_folder.strip('/')}/{self.store.filename_for(slug)}"

        for identifier in sources:
            try:
                content = await self.repository.fetch_raw(identifier, self.settings.repo_branch, remote_path)
                record = self.store.parser.parse_content(content, remote_path)
            except FetchFailedException as e:
                self.logger.debug(f"원격에서 찾을 수 없음: {slug} ({identifier}) - {e.message}")
                continue
            except ParseFailedException as e:
                self.logger.warning(f"원격 메타데이터 파싱 실패: {e.message}")
                continue

            record.source_origin = identifier
            return record

        return None

    async def require_script(self, slug: str) -> ScriptRecord:
        """
        슬러그로 메타데이터 조회 (없으면 예외)

        Raises:
            ScriptNotFoundException: 로컬과 원격 어디에도 없을 때
        """
        record = await self.get_script_by_slug(slug)
        if record is None:
            raise ScriptNotFoundException(slug)
        return record

    def list_local_records(self) -> list[ScriptRecord]:
        """로컬 메타데이터 레코드 목록 (파싱할 수 없는 파일은 제외)"""
        records = []
        for filename in self.store.list_metadata_files():
            record = self.cache.get(self.store.slug_for(filename))
            if record is not None:
                records.append(record)
        return records

    def list_script_cards(self) -> list[ScriptCard]:
        """로컬 스크립트 요약 카드 목록"""
        return [
            ScriptCard(
                name=record.name or record.slug,
                slug=record.slug,
                description=record.description,
                script_type=record.script_type,
                source_origin=record.source_origin
            )
            for record in self.list_local_records()
        ]

    # 에셋

    async def load_script(self, slug: str) -> AssetLoadResult:
        """슬러그에 해당하는 스크립트 에셋 다운로드"""
        self.repository.refresh()
        record = await self.require_script(slug)
        return await self.assets.load_script(record)

    async def check_script_exists(self, slug: str) -> ScriptFilesStatus:
        """슬러그에 해당하는 로컬 에셋 존재 여부"""
        record = await self.require_script(slug)
        return self.assets.check_script_exists(record)

    async def is_script_downloaded(self, slug: str) -> bool:
        """선언된 에셋이 모두 로컬에 있는지 여부"""
        record = await self.require_script(slug)
        return self.assets.is_script_downloaded(record)

    async def delete_script(self, slug: str) -> DeleteResult:
        """슬러그에 해당하는 로컬 에셋 삭제"""
        record = await self.require_script(slug)
        return self.assets.delete_script(record)

    # 비교

    async def compare_script(self, slug: str) -> ComparisonResult:
        """로컬 에셋과 원격 내용 비교"""
        self.repository.refresh()
        record = await self.require_script(slug)
        return await self.comparator.compare_script_content(record)

    async def get_script_diff(self, slug: str, file_path: str) -> ScriptDiff:
        """파일 하나의 로컬/원격 diff"""
        self.repository.refresh()
        record = await self.require_script(slug)
        return await self.comparator.get_script_diff(record, file_path)

    async def close(self) -> None:
        """리소스 정리"""
        await self.repository.close()
        self.logger.info("스크립트 동기화 리소스 정리 완료")

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        await self.close()


# 편의 함수들
async def sync_all_sources(settings: Optional[Settings] = None) -> SyncReport:
    """
    편의 함수: 활성화된 모든 저장소 동기화

    Args:
        settings: 시스템 설정

    Returns:
        전체 동기화 결과 보고서
    """
    async with ScriptDownloader(settings) as downloader:
        return await downloader.sync_all()


async def sync_source(source_identifier: str, settings: Optional[Settings] = None) -> SyncReport:
    """
    편의 함수: 단일 저장소 동기화

    Args:
        source_identifier: 저장소 URL
        settings: 시스템 설정

    Returns:
        저장소 동기화 결과 보고서
    """
    async with ScriptDownloader(settings) as downloader:
        return await downloader.sync_one(source_identifier)


async def diff_script(slug: str, file_path: str, settings: Optional[Settings] = None) -> ScriptDiff:
    """
    편의 함수: 파일 하나의 로컬/원격 diff

    Args:
        slug: 스크립트 슬러그
        file_path: 파일 경로 (예: ct/redis.sh)
        settings: 시스템 설정

    Returns:
        diff 결과
    """
    async with ScriptDownloader(settings) as downloader:
        return await downloader.get_script_diff(slug, file_path)

"""
다중 저장소 동기화 모듈

여러 원격 저장소의 메타데이터를 로컬 저장소로 미러링합니다.

- SyncPlanner: 한 저장소의 원격 목록과 로컬 상태를 비교해 다시 받아야 할
  항목을 계산합니다. 우선순위는 알지 못하며, 이미 다른 저장소가 차지한
  슬러그 집합(claimed)을 받아 제외하기만 합니다.
- SyncOrchestrator: 저장소를 우선순위 순서로 하나씩 처리하면서, 앞선
  저장소의 원격 목록에 있던 슬러그를 뒤 저장소가 다운로드하지 못하도록
  막습니다. 따라서 한 번의 전체 동기화에서 슬러그는 최대 한 번, 그 슬러그를
  가진 가장 높은 우선순위 저장소에서만 다운로드됩니다.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Optional

from ..exceptions import (
    FetchFailedException,
    ParseFailedException,
    PathValidationException,
    RateLimitedException,
    ScriptSyncException,
    WriteFailedException,
)
from ..models.base import RemoteEntry, SyncReport
from ..models.enums import SyncItemStatus
from ..monitoring.metrics import observe_sync_duration, record_fetch_error, record_sync_item
from ..utils.helpers import format_duration
from ..utils.logging import get_logger, source_logger
from .cache_manager import MetadataCache
from .registry import RepositoryProvider
from .repository import RepositoryBase
from .store import LocalArtifactStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class SyncWorkItem:
    """한 번의 계획 단계에서만 존재하는 다운로드 대상"""

    source_identifier: str
    remote_path: str
    filename: str


class SyncPlanner:
    """저장소 단위 동기화 계획기"""

    def __init__(self, store: LocalArtifactStore):
        self.store = store
        self.logger = logger

    def plan(
        self,
        source_identifier: str,
        remote_listing: Iterable[RemoteEntry],
        local_listing: Iterable[str],
        claimed: AbstractSet[str] = frozenset()
    ) -> list[SyncWorkItem]:
        """
        다시 받아야 할 항목 계산

        로컬에 없거나, 로컬 파일을 파싱할 수 없거나, source_origin이 없거나
        다른 저장소를 가리키면 동기화 대상입니다. 이미 다른 저장소가 차지한
        슬러그는 제외합니다.

        Args:
            source_identifier: 처리 중인 저장소 URL
            remote_listing: 원격 메타데이터 목록
            local_listing: 로컬 메타데이터 파일 이름 목록
            claimed: 이번 동기화에서 이미 다른 저장소가 차지한 슬러그

        Returns:
            동기화 대상 목록 (원격 목록 순서 유지)
        """
        local_files = set(local_listing)
        work_items = []

        for entry in remote_listing:
            slug = self.store.slug_for(entry.name)
            if slug in claimed:
                self.logger.debug(f"상위 우선순위 저장소가 차지한 항목 건너뜀: {slug}")
                continue

            if entry.name not in local_files or self._needs_claim(source_identifier, entry.name):
                work_items.append(SyncWorkItem(source_identifier, entry.path, entry.name))

        self.logger.debug(f"동기화 계획: {source_identifier} -> {len(work_items)}개 항목")
        return work_items

    def _needs_claim(self, source_identifier: str, filename: str) -> bool:
        """로컬 레코드를 현재 저장소가 다시 차지해야 하는지 여부"""
        try:
            record = self.store.read_record(filename)
        except FileNotFoundError:
            return True
        except (ParseFailedException, PathValidationException) as e:
            self.logger.warning(f"로컬 메타데이터를 읽을 수 없어 다시 받습니다: {e.message}")
            return True

        return record.source_origin != source_identifier


class SyncOrchestrator:
    """다중 저장소 동기화 오케스트레이터"""

    def __init__(
        self,
        provider: RepositoryProvider,
        client: RepositoryBase,
        store: LocalArtifactStore,
        cache: MetadataCache,
        settings,
        planner: Optional[SyncPlanner] = None
    ):
        """
        오케스트레이터 초기화

        Args:
            provider: 저장소 공급자
            client: 원격 저장소 클라이언트
            store: 로컬 저장소
            cache: 메타데이터 캐시 (쓰기 시 무효화)
            settings: 시스템 설정
            planner: 동기화 계획기 (없으면 기본 계획기)
        """
        self.provider = provider
        self.client = client
        self.store = store
        self.cache = cache
        self.settings = settings
        self.planner = planner or SyncPlanner(store)
        self.logger = logger

    async def sync_all(self) -> SyncReport:
        """
        활성화된 모든 저장소 동기화

        저장소별 실패는 errors에 기록하고 다음 저장소로 넘어갑니다. 저장소
        목록을 가져오지 못하거나 목록이 비어 있을 때만 전체가 실패합니다.

        Returns:
            전체 동기화 결과 보고서
        """
        start_time = time.time()

        try:
            sources = self.provider.list_enabled()
        except ScriptSyncException as e:
            self.logger.error(f"저장소 목록 조회 실패: {e.message}")
            return SyncReport(success=False, message=f"저장소 목록 조회 실패: {e.message}")

        if not sources:
            self.logger.warning("활성화된 저장소가 없습니다")
            return SyncReport(success=False, message="활성화된 저장소가 없습니다")

        self.logger.info(f"전체 동기화 시작: {len(sources)}개 저장소")
        self.client.refresh()

        claimed: set[str] = set()
        synced_keys: list[str] = []
        errors: dict[str, str] = {}

        for descriptor in sources:
            report = await self._sync_source(descriptor.identifier, frozenset(claimed))

            if not report.success:
                errors[descriptor.identifier] = report.message

            for key in report.synced_keys:
                if self.store.slug_for(key) in claimed:
                    continue
                synced_keys.append(key)

            claimed.update(self.store.slug_for(key) for key in report.synced_keys)
            claimed.update(report.listed_keys)

        backfilled = self.backfill_source_origin()
        if backfilled:
            self.logger.info(f"source_origin 보정 완료: {len(backfilled)}개 파일")

        duration = time.time() - start_time
        observe_sync_duration("all", duration)

        message = f"{len(sources)}개 저장소에서 {len(synced_keys)}개 파일 동기화 완료"
        if errors:
            message += f" (실패한 저장소 {len(errors)}개)"

        self.logger.info(f"전체 동기화 완료: {message} ({format_duration(duration)})")
        return SyncReport(
            success=True,
            message=message,
            count=len(synced_keys),
            synced_keys=synced_keys,
            errors=errors
        )

    async def sync_one(self, source_identifier: str, claimed: AbstractSet[str] = frozenset()) -> SyncReport:
        """
        단일 저장소 동기화

        원격 클라이언트를 갱신한 뒤 한 저장소만 처리합니다. 전체 동기화는
        한 번만 갱신하고 저장소마다 _sync_source를 호출합니다.

        Args:
            source_identifier: 저장소 URL
            claimed: 이미 다른 저장소가 차지한 슬러그

        Returns:
            저장소 동기화 결과 보고서
        """
        self.client.refresh()
        return await self._sync_source(source_identifier, claimed)

    async def _sync_source(self, source_identifier: str, claimed: AbstractSet[str]) -> SyncReport:
        """
        저장소 하나 동기화

        항목 하나의 다운로드/파싱/쓰기 실패는 로그만 남기고 건너뜁니다.
        성공 보고서는 보고된 항목이 성공했다는 뜻일 뿐, 계획된 모든 항목이
        성공했다는 뜻은 아닙니다.

        Args:
            source_identifier: 저장소 URL
            claimed: 이번 동기화에서 이미 다른 저장소가 차지한 슬러그

        Returns:
            저장소 동기화 결과 보고서
        """
        start_time = time.time()
        self.logger.info(f"저장소 동기화 시작: {source_identifier}")

        try:
            remote_listing = await self.client.list_directory(
                source_identifier, self.settings.json_folder, self.settings.repo_branch
            )
        except RateLimitedException as e:
            self.logger.error(f"저장소 목록 조회 실패 (요청 한도 초과): {source_identifier}")
            return SyncReport(success=False, message=e.message)
        except ScriptSyncException as e:
            self.logger.error(f"저장소 목록 조회 실패: {source_identifier} - {e.message}")
            return SyncReport(success=False, message=e.message)

        listed_keys = [self.store.slug_for(entry.name) for entry in remote_listing]
        work_items = self.planner.plan(
            source_identifier,
            remote_listing,
            self.store.list_metadata_files(),
            claimed
        )
        record_sync_item(source_identifier, SyncItemStatus.SKIPPED.value, len(remote_listing) - len(work_items))

        if not work_items:
            self.logger.info(f"모든 파일이 최신 상태입니다: {source_identifier}")
            return SyncReport(
                success=True,
                message="모든 파일이 최신 상태입니다",
                listed_keys=listed_keys
            )

        semaphore = asyncio.Semaphore(self.settings.max_concurrent_downloads)
        results = await asyncio.gather(
            *(self._sync_item(item, claimed, semaphore) for item in work_items)
        )
        synced_keys = [filename for filename in results if filename]

        failed = len(work_items) - len(synced_keys)
        record_sync_item(source_identifier, SyncItemStatus.SYNCED.value, len(synced_keys))
        record_sync_item(source_identifier, SyncItemStatus.FAILED.value, failed)
        observe_sync_duration("source", time.time() - start_time)

        message = f"{len(synced_keys)}개 파일 동기화 완료"
        if failed:
            message += f" (실패 {failed}개)"

        self.logger.info(f"저장소 동기화 완료: {source_identifier} - {message}")
        return SyncReport(
            success=True,
            message=message,
            count=len(synced_keys),
            synced_keys=synced_keys,
            listed_keys=listed_keys
        )

    async def _sync_item(
        self,
        item: SyncWorkItem,
        claimed: AbstractSet[str],
        semaphore: asyncio.Semaphore
    ) -> Optional[str]:
        """항목 하나 다운로드 후 저장 (실패 시 None)"""
        log = source_logger(self.logger, item.source_identifier)
        async with semaphore:
            try:
                content = await self.client.fetch_raw(
                    item.source_identifier, self.settings.repo_branch, item.remote_path
                )
            except FetchFailedException as e:
                log.error(f"다운로드 실패: {item.remote_path} - {e.message}")
                return None

        try:
            record = self.store.parser.parse_content(content, item.remote_path)
        except ParseFailedException as e:
            record_fetch_error("parse_failed")
            log.error(f"원격 메타데이터 건너뜀: {e.message}")
            return None

        if record.slug in claimed:
            log.warning(f"상위 우선순위 저장소가 차지한 슬러그 건너뜀: {record.slug} ({item.remote_path})")
            return None

        record.source_origin = item.source_identifier

        try:
            filename = self.store.write_record(record)
        except (WriteFailedException, PathValidationException) as e:
            log.error(f"메타데이터 저장 실패: {e.message}")
            return None

        self.cache.invalidate(record.slug)
        return filename

    def backfill_source_origin(self) -> list[str]:
        """
        source_origin이 없는 레거시 레코드에 기본 저장소 URL 기록

        Returns:
            보정된 파일 이름 목록
        """
        default_origin = self.settings.default_repository_url
        updated = []

        for filename in self.store.list_metadata_files():
            try:
                record = self.store.read_record(filename)
            except FileNotFoundError:
                continue
            except (ParseFailedException, PathValidationException) as e:
                self.logger.warning(f"source_origin 보정 건너뜀: {e.message}")
                continue

            if record.source_origin:
                continue

            record.source_origin = default_origin
            try:
                self.store.write_record(record, filename)
            except WriteFailedException as e:
                self.logger.error(f"source_origin 보정 실패: {e.message}")
                continue

            self.cache.invalidate(record.slug)
            updated.append(filename)

        return updated

    def remove_source_records(self, source_identifier: str) -> list[str]:
        """
        저장소 삭제 시 해당 저장소에서 온 메타데이터 파일 제거

        Args:
            source_identifier: 삭제된 저장소 URL

        Returns:
            삭제된 파일 이름 목록
        """
        removed = []

        for filename in self.store.list_metadata_files():
            try:
                record = self.store.read_record(filename)
            except FileNotFoundError:
                continue
            except (ParseFailedException, PathValidationException) as e:
                self.logger.warning(f"메타데이터를 읽을 수 없어 건너뜀: {e.message}")
                continue

            if record.source_origin != source_identifier:
                continue

            try:
                self.store.delete_metadata(filename)
            except OSError as e:
                self.logger.error(f"메타데이터 삭제 실패: {filename} - {e}")
                continue

            self.cache.invalidate(record.slug)
            removed.append(filename)

        self.logger.info(f"저장소 메타데이터 삭제 완료: {source_identifier} ({len(removed)}개)")
        return removed

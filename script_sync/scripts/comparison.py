"""
로컬/원격 스크립트 비교 모듈

로컬에 내려받은 에셋과 원격 저장소의 현재 내용을 비교합니다. 기본 카테고리
에셋은 다운로드 시와 같은 재작성을 원격 내용에 적용한 뒤 비교하므로 재작성
때문에 생기는 허위 차이가 없습니다.

비교 실패는 예외로 올리지 않고 error 필드에 담아 "동일함"과 "비교할 수 없음"을
구분할 수 있게 합니다.
"""

import asyncio
from typing import Optional

from ..exceptions import ScriptSyncException
from ..models.base import ComparisonResult, FileComparison, ScriptDiff, ScriptRecord
from ..monitoring.metrics import record_comparison
from ..utils.logging import get_logger
from .assets import AssetManager
from .diff import generate_diff
from .resolver import ResolvedAsset
from .rewrite import rewrite_bootstrap

logger = get_logger(__name__)


class ContentComparator:
    """로컬/원격 에셋 비교기"""

    def __init__(self, assets: AssetManager, settings):
        """
        비교기 초기화

        Args:
            assets: 에셋 관리자 (클라이언트, 저장소, 경로 해석기 공유)
            settings: 시스템 설정
        """
        self.assets = assets
        self.client = assets.client
        self.store = assets.store
        self.settings = settings
        self.logger = logger

    def _all_assets(self, record: ScriptRecord) -> list[ResolvedAsset]:
        return self.assets.declared_assets(record) + self.assets.install_assets(record)

    def _find_asset(self, record: ScriptRecord, file_path: str) -> Optional[ResolvedAsset]:
        """로컬 상대 경로 또는 선언 경로로 에셋 찾기"""
        for asset in self._all_assets(record):
            if file_path in (asset.relative_path, asset.declared_path):
                return asset
        return None

    async def _fetch_remote(self, record: ScriptRecord, asset: ResolvedAsset) -> str:
        """원격 내용 조회 (다운로드 시와 같은 재작성 적용)"""
        content = await self.client.fetch_text(
            self.assets.origin_for(record), asset.declared_path, self.settings.repo_branch
        )
        if asset.rewrite:
            content = rewrite_bootstrap(content, self.settings.bootstrap_helper_path)
        return content

    async def compare_single_file(self, record: ScriptRecord, asset: ResolvedAsset) -> FileComparison:
        """
        파일 하나 비교 (예외를 올리지 않음)

        Args:
            record: 메타데이터 레코드
            asset: 비교할 에셋

        Returns:
            파일 비교 결과 (실패 시 has_differences=False, error 설정)
        """
        try:
            local_content = self.store.read_asset(asset.relative_path)
            remote_content = await self._fetch_remote(record, asset)
        except ScriptSyncException as e:
            record_comparison("error")
            self.logger.warning(f"[{record.slug}] 파일 비교 실패: {asset.relative_path} - {e.message}")
            return FileComparison(file_path=asset.relative_path, error=e.message)
        except (OSError, UnicodeDecodeError) as e:
            record_comparison("error")
            self.logger.warning(f"[{record.slug}] 파일 비교 실패: {asset.relative_path} - {e}")
            return FileComparison(file_path=asset.relative_path, error=str(e))

        has_differences = local_content != remote_content
        record_comparison("different" if has_differences else "identical")
        return FileComparison(file_path=asset.relative_path, has_differences=has_differences)

    async def compare_script_content(self, record: ScriptRecord) -> ComparisonResult:
        """
        로컬에 있는 모든 에셋을 원격과 비교

        파일별 비교는 설정된 동시 실행 수 안에서 병렬로 수행됩니다.

        Args:
            record: 메타데이터 레코드

        Returns:
            전체 비교 결과 (차이가 있는 파일 목록 포함)
        """
        local_assets = [
            asset for asset in self._all_assets(record)
            if self.store.asset_exists(asset.relative_path)
        ]
        if not local_assets:
            return ComparisonResult(error="로컬에 내려받은 파일이 없습니다")

        semaphore = asyncio.Semaphore(self.settings.max_concurrent_downloads)

        async def bounded(asset: ResolvedAsset) -> FileComparison:
            async with semaphore:
                return await self.compare_single_file(record, asset)

        comparisons = await asyncio.gather(*(bounded(asset) for asset in local_assets))

        differences = [c.file_path for c in comparisons if c.has_differences]
        errors = [f"{c.file_path}: {c.error}" for c in comparisons if c.error]

        self.logger.info(f"[{record.slug}] 비교 완료: 변경된 파일 {len(differences)}개")
        return ComparisonResult(
            has_differences=bool(differences),
            differences=differences,
            error="; ".join(errors) if errors else None
        )

    async def get_script_diff(self, record: ScriptRecord, file_path: str) -> ScriptDiff:
        """
        파일 하나의 줄 단위 diff

        Args:
            record: 메타데이터 레코드
            file_path: 로컬 상대 경로 또는 선언 경로 (예: ct/redis.sh)

        Returns:
            diff 결과 (어느 한쪽 내용이 없으면 diff는 None)
        """
        asset = self._find_asset(record, file_path)
        if asset is None:
            return ScriptDiff(error=f"스크립트에 선언되지 않은 파일입니다: {file_path}")

        result = ScriptDiff()
        errors = []

        try:
            result.local_content = self.store.read_asset(asset.relative_path)
        except (OSError, UnicodeDecodeError, ScriptSyncException) as e:
            errors.append(f"로컬 파일을 읽을 수 없습니다: {e}")

        try:
            result.remote_content = await self._fetch_remote(record, asset)
        except ScriptSyncException as e:
            errors.append(e.message)

        if result.local_content is not None and result.remote_content is not None:
            result.diff = generate_diff(
                result.local_content,
                result.remote_content,
                self.settings.diff_lookahead
            )

        if errors:
            result.error = "; ".join(errors)
        return result

"""
스크립트 에셋 관리 모듈

메타데이터 레코드에 선언된 에셋 파일을 원격 저장소에서 내려받아 로컬
카테고리 디렉토리에 저장하고, 존재 여부 확인과 삭제 기능을 제공합니다.
"""

from typing import Optional

from ..exceptions import FetchFailedException, PathValidationException, WriteFailedException
from ..models.base import AssetLoadResult, DeleteResult, ScriptFilesStatus, ScriptRecord
from ..utils.logging import get_logger
from .repository import RepositoryBase
from .resolver import AssetPathResolver, ResolvedAsset
from .rewrite import rewrite_bootstrap
from .store import LocalArtifactStore

logger = get_logger(__name__)


class AssetManager:
    """스크립트 에셋 관리자"""

    def __init__(
        self,
        client: RepositoryBase,
        store: LocalArtifactStore,
        settings,
        resolver: Optional[AssetPathResolver] = None
    ):
        """
        에셋 관리자 초기화

        Args:
            client: 원격 저장소 클라이언트
            store: 로컬 저장소
            settings: 시스템 설정
            resolver: 에셋 경로 해석기 (없으면 기본 해석기)
        """
        self.client = client
        self.store = store
        self.settings = settings
        self.resolver = resolver or AssetPathResolver()
        self.logger = logger

    def origin_for(self, record: ScriptRecord) -> str:
        """레코드의 원격 저장소 URL (없으면 기본 저장소)"""
        return record.source_origin or self.settings.default_repository_url

    def declared_assets(self, record: ScriptRecord) -> list[ResolvedAsset]:
        """선언된 에셋 해석 결과 (잘못된 경로는 제외)"""
        assets = []
        for reference in record.asset_references:
            if not reference.path:
                continue
            try:
                assets.append(self.resolver.resolve(reference.path))
            except PathValidationException as e:
                self.logger.warning(f"[{record.slug}] 에셋 경로 무시: {e.message}")
        return assets

    def install_assets(self, record: ScriptRecord) -> list[ResolvedAsset]:
        """기본 카테고리 레코드에 딸린 설치 스크립트 해석 결과"""
        return [self.resolver.resolve(path) for path in self.resolver.install_script_paths(record)]

    async def _download(self, origin: str, asset: ResolvedAsset) -> str:
        """에셋 하나 다운로드 후 저장"""
        content = await self.client.fetch_text(origin, asset.declared_path, self.settings.repo_branch)
        if asset.rewrite:
            content = rewrite_bootstrap(content, self.settings.bootstrap_helper_path)
        self.store.write_asset(asset.relative_path, content)
        return asset.relative_path

    async def load_script(self, record: ScriptRecord) -> AssetLoadResult:
        """
        스크립트 에셋 다운로드

        선언된 에셋 중 하나라도 실패하면 실패 결과를 반환합니다. 파생 설치
        스크립트는 원격에 없을 수 있으므로 실패해도 경고만 남깁니다.

        Args:
            record: 메타데이터 레코드

        Returns:
            에셋 다운로드 결과
        """
        origin = self.origin_for(record)
        files: list[str] = []

        for asset in self.declared_assets(record):
            try:
                files.append(await self._download(origin, asset))
            except (FetchFailedException, WriteFailedException, PathValidationException) as e:
                self.logger.error(f"[{record.slug}] 에셋 다운로드 실패: {asset.declared_path} - {e.message}")
                return AssetLoadResult(success=False, message=e.message, files=files)

        for asset in self.install_assets(record):
            try:
                files.append(await self._download(origin, asset))
            except (FetchFailedException, WriteFailedException) as e:
                self.logger.warning(f"[{record.slug}] 설치 스크립트 다운로드 실패: {asset.declared_path} - {e.message}")

        if not files:
            return AssetLoadResult(success=False, message="다운로드할 에셋이 없습니다")

        self.logger.info(f"[{record.slug}] 에셋 다운로드 완료: {len(files)}개 파일")
        return AssetLoadResult(success=True, message=f"{len(files)}개 파일 다운로드 완료", files=files)

    def check_script_exists(self, record: ScriptRecord) -> ScriptFilesStatus:
        """
        로컬 에셋 존재 여부 확인

        Args:
            record: 메타데이터 레코드

        Returns:
            선언 에셋/설치 스크립트 존재 여부와 존재하는 파일 목록
        """
        status = ScriptFilesStatus()

        for asset in self.declared_assets(record):
            if self.store.asset_exists(asset.relative_path):
                status.primary_exists = True
                status.files.append(asset.relative_path)

        for asset in self.install_assets(record):
            if self.store.asset_exists(asset.relative_path):
                status.install_exists = True
                status.files.append(asset.relative_path)

        return status

    def is_script_downloaded(self, record: ScriptRecord) -> bool:
        """선언된 에셋이 모두 로컬에 있는지 여부"""
        assets = self.declared_assets(record)
        if not assets:
            return False
        return all(self.store.asset_exists(asset.relative_path) for asset in assets)

    def delete_script(self, record: ScriptRecord) -> DeleteResult:
        """
        로컬 에셋 삭제

        Args:
            record: 메타데이터 레코드

        Returns:
            삭제 결과
        """
        deleted: list[str] = []

        for asset in self.declared_assets(record) + self.install_assets(record):
            try:
                if self.store.delete_asset(asset.relative_path):
                    deleted.append(asset.relative_path)
            except OSError as e:
                self.logger.error(f"[{record.slug}] 파일 삭제 실패: {asset.relative_path} - {e}")
                return DeleteResult(success=False, message=str(e), deleted_files=deleted)

        if not deleted:
            return DeleteResult(success=False, message="삭제할 파일이 없습니다")

        self.logger.info(f"[{record.slug}] 에셋 삭제 완료: {len(deleted)}개 파일")
        return DeleteResult(success=True, message=f"{len(deleted)}개 파일 삭제 완료", deleted_files=deleted)

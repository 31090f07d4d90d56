"""
에셋 경로 해석 모듈

메타데이터에 선언된 에셋 경로를 로컬 카테고리 디렉토리와 파일 이름으로
변환하고, 쓰기 전에 잘못된 경로를 걸러냅니다.
"""

from dataclasses import dataclass

from ..exceptions import PathValidationException
from ..models.base import ScriptRecord
from ..models.enums import AssetCategory
from ..utils.logging import get_logger

logger = get_logger(__name__)

# 하위 경로 구조를 그대로 보존하는 카테고리
SUBPATH_CATEGORIES = (AssetCategory.TOOLS, AssetCategory.VM, AssetCategory.INSTALL)


@dataclass(frozen=True)
class ResolvedAsset:
    """해석된 에셋 위치"""

    declared_path: str
    category: AssetCategory
    directory: str
    file_name: str
    rewrite: bool

    @property
    def relative_path(self) -> str:
        """로컬 저장소 루트 기준 상대 경로"""
        return f"{self.directory}/{self.file_name}"


def validate_path(path: str) -> None:
    """
    인접한 동일 세그먼트 검사 (예: ct/ct, tools/foo/foo)

    Args:
        path: 검사할 경로

    Raises:
        PathValidationException: 같은 이름의 세그먼트가 연속될 때
    """
    parts = path.replace("\\", "/").split("/")
    for current, following in zip(parts, parts[1:]):
        if current and current == following:
            raise PathValidationException(path, f"중첩된 디렉토리 감지 ({current}/{following})")


class AssetPathResolver:
    """선언 경로 → 로컬 경로 해석기"""

    def resolve(self, declared_path: str) -> ResolvedAsset:
        """
        선언된 에셋 경로 해석

        Args:
            declared_path: 저장소 기준 선언 경로 (예: tools/addon/foo.sh)

        Returns:
            해석된 에셋 위치

        Raises:
            PathValidationException: 파일 이름이 없거나, 상위 경로 참조가 있거나,
                기본 디렉토리와 파일 이름이 같아 중첩을 피할 수 없는 경우
        """
        normalized = declared_path.replace("\\", "/").strip()
        segments = normalized.split("/")

        if not normalized or not segments[-1]:
            raise PathValidationException(declared_path, "파일 이름이 없습니다")
        if normalized.startswith("/"):
            raise PathValidationException(declared_path, "절대 경로는 허용되지 않습니다")
        if any(segment in ("..", ".") for segment in segments):
            raise PathValidationException(declared_path, "상대 경로 참조는 허용되지 않습니다")

        file_name = segments[-1]
        prefix = segments[0] if len(segments) > 1 else ""
        category = self._category_for(prefix)

        if category in SUBPATH_CATEGORIES:
            base = category.value
            computed = "/".join([base, *[s for s in segments[1:-1] if s]])
            directory = self._downgrade_if_nested(base, computed, file_name)
            return ResolvedAsset(declared_path, category, directory, file_name, rewrite=False)

        if category is None:
            logger.debug(f"알 수 없는 경로 접두사, 기본 카테고리로 처리: {declared_path}")

        # ct/ct 처럼 기본 디렉토리와 파일 이름이 같으면 대체할 곳이 없음
        validate_path(f"{AssetCategory.PRIMARY.value}/{file_name}")
        return ResolvedAsset(
            declared_path,
            AssetCategory.PRIMARY,
            AssetCategory.PRIMARY.value,
            file_name,
            rewrite=True
        )

    def install_script_paths(self, record: ScriptRecord) -> list[str]:
        """
        기본 카테고리 레코드에 딸린 설치 스크립트 경로

        Args:
            record: 메타데이터 레코드

        Returns:
            install/<slug>-install.sh 와 (alpine 변형이 있으면) alpine 설치 스크립트 경로
        """
        if not record.has_primary_asset:
            return []

        install_dir = AssetCategory.INSTALL.value
        paths = [f"{install_dir}/{record.slug}-install.sh"]
        if record.has_alpine_primary_variant:
            paths.append(f"{install_dir}/alpine-{record.slug}-install.sh")
        return paths

    def resolve_record(self, record: ScriptRecord) -> list[ResolvedAsset]:
        """
        레코드의 모든 에셋 해석 (선언 에셋 + 설치 스크립트)

        잘못된 선언 경로는 경고 로그와 함께 건너뜁니다.
        """
        resolved = []
        for reference in record.asset_references:
            if not reference.path:
                continue
            try:
                resolved.append(self.resolve(reference.path))
            except PathValidationException as e:
                logger.warning(f"[{record.slug}] 에셋 경로 무시: {e.message}")

        for path in self.install_script_paths(record):
            resolved.append(self.resolve(path))
        return resolved

    def _category_for(self, prefix: str):
        """경로 접두사에 해당하는 카테고리 (없으면 None)"""
        for category in AssetCategory:
            if category.value == prefix:
                return category
        return None

    def _downgrade_if_nested(self, base: str, computed: str, file_name: str) -> str:
        """
        계산된 최종 경로(디렉토리/파일 이름)에 중첩 세그먼트가 있으면 카테고리
        기본 디렉토리로 대체

        Raises:
            PathValidationException: 기본 디렉토리로 바꿔도 중첩될 때 (예: tools/tools)
        """
        try:
            validate_path(f"{computed}/{file_name}")
        except PathValidationException as e:
            logger.warning(f"[경로 검증] {e.message}. 기본 디렉토리 '{base}'를 대신 사용합니다")
            validate_path(f"{base}/{file_name}")
            return base
        return computed

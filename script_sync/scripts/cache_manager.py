"""
메타데이터 캐시 관리 모듈

슬러그 → 메타데이터 레코드의 프로세스 내 캐시를 관리합니다. 로컬 저장소에서
지연 로드하며, 오케스트레이터가 파일을 다시 쓸 때 무효화합니다.
"""

from typing import Optional

from ..exceptions import ParseFailedException, PathValidationException
from ..models.base import ScriptRecord
from ..utils.logging import get_logger
from .store import LocalArtifactStore

logger = get_logger(__name__)


class MetadataCache:
    """메타데이터 레코드 캐시"""

    def __init__(self, store: LocalArtifactStore, default_origin: Optional[str] = None):
        """
        캐시 초기화

        Args:
            store: 로컬 저장소
            default_origin: source_origin이 없는 레거시 레코드에 채울 저장소 URL
        """
        self.store = store
        self.default_origin = default_origin
        self.logger = logger
        self._entries: dict[str, ScriptRecord] = {}

    def __contains__(self, slug: str) -> bool:
        return slug in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, slug: str) -> Optional[ScriptRecord]:
        """
        레코드 조회 (캐시 우선, 없으면 로컬 저장소에서 로드)

        반환되는 레코드는 캐시 항목의 복사본이므로 호출자가 수정해도 캐시에
        영향을 주지 않습니다.

        Args:
            slug: 스크립트 슬러그

        Returns:
            레코드 복사본 (로컬에 없거나 파싱할 수 없으면 None)
        """
        cached = self._entries.get(slug)
        if cached is None:
            cached = self._load(slug)
            if cached is None:
                return None
            self._entries[slug] = cached

        return cached.model_copy(deep=True)

    def invalidate(self, slug: str) -> None:
        """슬러그에 해당하는 캐시 항목 제거"""
        if self._entries.pop(slug, None) is not None:
            self.logger.debug(f"캐시 무효화: {slug}")

    def _load(self, slug: str) -> Optional[ScriptRecord]:
        """로컬 저장소에서 레코드 로드"""
        filename = self.store.filename_for(slug)

        try:
            record = self.store.read_record(filename)
        except FileNotFoundError:
            return None
        except (ParseFailedException, PathValidationException) as e:
            self.logger.warning(f"캐시 로드 실패: {e.message}")
            return None

        # 레거시 레코드 호환 (메모리에서만 보정)
        if not record.source_origin and self.default_origin:
            record.source_origin = self.default_origin

        return record

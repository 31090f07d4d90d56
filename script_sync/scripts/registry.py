"""
저장소 레지스트리 인터페이스 모듈

동기화 대상 저장소 목록을 제공하는 공급자를 정의합니다. 저장소 등록/수정은
이 패키지 밖의 책임이며, 여기서는 활성화된 저장소를 우선순위 순서로 읽기만 합니다.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ..config.settings import GITHUB_REPOSITORY_PATTERN
from ..exceptions import InvalidSourceIdentifierException
from ..models.base import SourceDescriptor


def validate_repository_url(identifier: str) -> str:
    """
    저장소 URL 검증

    Args:
        identifier: 저장소 URL

    Returns:
        끝의 "/"를 제거한 저장소 URL

    Raises:
        InvalidSourceIdentifierException: https://github.com/owner/repo 형식이 아닐 때
    """
    normalized = (identifier or "").strip().rstrip("/")
    if not GITHUB_REPOSITORY_PATTERN.match(normalized):
        raise InvalidSourceIdentifierException(identifier)
    return normalized


class RepositoryProvider(ABC):
    """저장소 공급자 추상 클래스"""

    @abstractmethod
    def list_enabled(self) -> list[SourceDescriptor]:
        """
        활성화된 저장소 목록 (우선순위 오름차순, 등록 시간 오름차순)

        Returns:
            정렬된 저장소 정보 목록
        """
        pass

    def get(self, identifier: str) -> Optional[SourceDescriptor]:
        """활성화된 저장소 중 식별자가 일치하는 항목"""
        for descriptor in self.list_enabled():
            if descriptor.identifier == identifier:
                return descriptor
        return None


class StaticRepositoryProvider(RepositoryProvider):
    """고정 목록 기반 저장소 공급자"""

    def __init__(self, descriptors: Iterable[SourceDescriptor]):
        self._descriptors = list(descriptors)

    def list_enabled(self) -> list[SourceDescriptor]:
        enabled = [d for d in self._descriptors if d.enabled]
        return sorted(enabled, key=lambda d: d.sort_key())


class SettingsRepositoryProvider(StaticRepositoryProvider):
    """설정(REPOSITORIES 환경 변수) 기반 저장소 공급자"""

    def __init__(self, settings):
        super().__init__(settings.repositories)
        self.settings = settings

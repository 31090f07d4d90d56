"""
공통 테스트 픽스처

원격 저장소 대신 메모리 안의 가짜 저장소를 사용합니다.
"""

import json
from datetime import datetime, timedelta
from typing import Optional

import pytest

from script_sync.config.settings import Settings
from script_sync.exceptions import FetchFailedException, RateLimitedException
from script_sync.models.base import RemoteEntry, SourceDescriptor
from script_sync.scripts.repository import RepositoryBase

SOURCE_A = "https://github.com/alpha/scripts"
SOURCE_B = "https://github.com/beta/scripts"
JSON_FOLDER = "frontend/public/json"


def metadata_document(slug: str, name: Optional[str] = None, **extra) -> dict:
    """테스트용 메타데이터 문서"""
    document = {
        "slug": slug,
        "name": name or slug.title(),
        "description": f"{slug} 설명",
        "type": "ct",
        "install_methods": [{"type": "default", "script": f"ct/{slug}.sh"}],
    }
    document.update(extra)
    return document


def metadata_bytes(slug: str, **kwargs) -> bytes:
    return json.dumps(metadata_document(slug, **kwargs)).encode("utf-8")


class FakeRepository(RepositoryBase):
    """메모리 기반 가짜 원격 저장소"""

    def __init__(self, settings):
        super().__init__(settings)
        self.files: dict[str, dict[str, bytes]] = {}
        self.fetch_calls: list[tuple[str, str]] = []
        self.failing_paths: set[tuple[str, str]] = set()
        self.rate_limited: set[str] = set()
        self.closed = False

    def add_file(self, source: str, path: str, content) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files.setdefault(source, {})[path] = content

    def add_metadata(self, source: str, slug: str, **kwargs) -> None:
        self.add_file(source, f"{JSON_FOLDER}/{slug}.json", metadata_bytes(slug, **kwargs))

    async def list_directory(self, source, path, branch=None):
        if source in self.rate_limited:
            raise RateLimitedException(f"{source}/{path}")
        if source not in self.files:
            raise FetchFailedException(f"{source}/{path}", "Not Found", 404)

        prefix = f"{path.strip('/')}/"
        return [
            RemoteEntry(name=file_path[len(prefix):], path=file_path)
            for file_path in sorted(self.files[source])
            if file_path.startswith(prefix)
            and "/" not in file_path[len(prefix):]
            and file_path.endswith(self.metadata_extension)
        ]

    async def fetch_raw(self, source, branch, path):
        self.fetch_calls.append((source, path))
        if (source, path) in self.failing_paths:
            raise FetchFailedException(f"{source}/{path}", "connection reset")
        try:
            return self.files[source][path]
        except KeyError:
            raise FetchFailedException(f"{source}/{path}", "Not Found", 404)

    async def close(self):
        self.closed = True

    def metadata_fetches(self, slug: str) -> int:
        """슬러그 메타데이터 다운로드 횟수"""
        return sum(1 for _, path in self.fetch_calls if path.endswith(f"/{slug}.json"))


@pytest.fixture
def settings(tmp_path):
    """임시 디렉토리를 쓰는 테스트 설정 (저장소 A 우선순위 1, B 우선순위 2)"""
    now = datetime.now()
    return Settings(
        scripts_dir=str(tmp_path / "scripts"),
        git_checkout_dir=str(tmp_path / "checkouts"),
        default_repository_url=SOURCE_A,
        repositories=[
            SourceDescriptor(identifier=SOURCE_A, priority=1, created_at=now),
            SourceDescriptor(identifier=SOURCE_B, priority=2, created_at=now + timedelta(seconds=1)),
        ],
        max_concurrent_downloads=4,
    )


@pytest.fixture
def fake_repository(settings):
    return FakeRepository(settings)

"""
원격 스크립트 저장소 통합 모듈

GitHub 저장소에서 메타데이터 폴더 목록과 원본 파일을 가져오는 기능을 제공합니다.
재시도 정책은 없으며, 요청 한도 초과는 별도 예외로 구분해 호출자에게 넘깁니다.
"""

import asyncio
import json
import re
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import aiohttp
import git

from ..exceptions import (
    FetchFailedException,
    InvalidSourceIdentifierException,
    RateLimitedException,
)
from ..models.base import RemoteEntry
from ..monitoring.metrics import record_fetch_error
from ..utils.logging import get_logger

logger = get_logger(__name__)

GITHUB_URL_PATTERN = re.compile(r"github\.com/([^/]+)/([^/#?]+)")


def parse_repository_path(identifier: str) -> str:
    """
    저장소 URL에서 owner/repo 경로 추출

    Args:
        identifier: 저장소 URL (https://github.com/owner/repo)

    Returns:
        "owner/repo" 문자열

    Raises:
        InvalidSourceIdentifierException: GitHub 저장소 URL이 아닐 때
    """
    match = GITHUB_URL_PATTERN.search(identifier or "")
    if not match:
        raise InvalidSourceIdentifierException(identifier)

    owner, repo = match.groups()
    if repo.endswith(".git"):
        repo = repo[:-len(".git")]
    if not repo:
        raise InvalidSourceIdentifierException(identifier)
    return f"{owner}/{repo}"


class RepositoryBase(ABC):
    """원격 저장소 클라이언트 기본 추상 클래스"""

    def __init__(self, settings):
        """저장소 기본 초기화"""
        self.settings = settings
        self.logger = logger

    @property
    def metadata_extension(self) -> str:
        """메타데이터 파일 확장자"""
        return getattr(self.settings, "metadata_extension", ".json")

    @abstractmethod
    async def list_directory(self, source: str, path: str, branch: Optional[str] = None) -> list[RemoteEntry]:
        """
        원격 디렉토리 목록 조회 (추상 메서드)

        Args:
            source: 저장소 URL
            path: 저장소 기준 디렉토리 경로
            branch: 브랜치 (None이면 설정값)

        Returns:
            메타데이터 확장자로 끝나는 항목 목록
        """
        pass

    @abstractmethod
    async def fetch_raw(self, source: str, branch: Optional[str], path: str) -> bytes:
        """
        원격 원본 파일 다운로드 (추상 메서드)

        Args:
            source: 저장소 URL
            branch: 브랜치 (None이면 설정값)
            path: 저장소 기준 파일 경로

        Returns:
            파일 내용
        """
        pass

    async def fetch_text(self, source: str, path: str, branch: Optional[str] = None) -> str:
        """원격 파일을 UTF-8 텍스트로 다운로드"""
        content = await self.fetch_raw(source, branch, path)
        return content.decode('utf-8', errors='replace')

    def _branch(self, branch: Optional[str]) -> str:
        return branch or self.settings.repo_branch

    def refresh(self) -> None:
        """
        다음 조회부터 원격의 최신 상태를 다시 읽도록 표시

        요청마다 원격을 읽는 클라이언트는 할 일이 없습니다.
        """

    async def close(self) -> None:
        """리소스 정리"""

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        await self.close()


class GitHubRepository(RepositoryBase):
    """GitHub API/원본 파일 저장소 클래스"""

    def __init__(self, settings, session: Optional[aiohttp.ClientSession] = None):
        """
        GitHub 저장소 초기화

        Args:
            settings: 시스템 설정
            session: 외부에서 주입한 HTTP 세션 (선택사항, 주입 시 닫지 않음)
        """
        super().__init__(settings)
        self.api_url = settings.github_api_url.rstrip('/')
        self.raw_url = settings.github_raw_url.rstrip('/')
        self.session = session
        self._owns_session = session is None

    def _headers(self) -> dict[str, str]:
        """공통 요청 헤더"""
        headers = {'User-Agent': self.settings.user_agent}
        if self.settings.github_token:
            headers['Authorization'] = f"token {self.settings.github_token}"
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        """HTTP 세션 생성"""
        if not self.session:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.request_timeout),
                headers=self._headers()
            )
            self._owns_session = True
        return self.session

    async def _get(self, url: str, params: Optional[dict] = None, accept: Optional[str] = None) -> bytes:
        """
        GET 요청 수행

        Raises:
            RateLimitedException: HTTP 403
            FetchFailedException: 그 밖의 HTTP 오류 또는 네트워크 오류
        """
        session = await self._get_session()
        headers = {'Accept': accept} if accept else None

        try:
            async with session.get(url, params=params, headers=headers) as response:
                if response.status == 403:
                    record_fetch_error("rate_limited")
                    raise RateLimitedException(url, response.status)
                if response.status != 200:
                    record_fetch_error("fetch_failed")
                    raise FetchFailedException(url, response.reason or "HTTP 오류", response.status)
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            record_fetch_error("fetch_failed")
            raise FetchFailedException(url, str(e) or type(e).__name__) from e

    async def list_directory(self, source: str, path: str, branch: Optional[str] = None) -> list[RemoteEntry]:
        """GitHub contents API로 메타데이터 파일 목록 조회"""
        repo_path = parse_repository_path(source)
        url = f"{self.api_url}/repos/{repo_path}/contents/{path.strip('/')}"

        content = await self._get(
            url,
            params={'ref': self._branch(branch)},
            accept='application/vnd.github.v3+json'
        )

        try:
            entries = json.loads(content)
        except ValueError as e:
            record_fetch_error("parse_failed")
            raise FetchFailedException(url, f"목록 응답 파싱 실패: {e}") from e

        if not isinstance(entries, list):
            raise FetchFailedException(url, "디렉토리 목록이 아닙니다")

        result = [
            RemoteEntry(name=entry['name'], path=entry['path'])
            for entry in entries
            if isinstance(entry, dict)
            and entry.get('type', 'file') == 'file'
            and str(entry.get('name', '')).endswith(self.metadata_extension)
        ]
        self.logger.debug(f"원격 목록 조회: {source} ({len(result)}개)")
        return result

    async def fetch_raw(self, source: str, branch: Optional[str], path: str) -> bytes:
        """raw.githubusercontent.com에서 원본 파일 다운로드"""
        repo_path = parse_repository_path(source)
        url = f"{self.raw_url}/{repo_path}/{self._branch(branch)}/{path.lstrip('/')}"
        return await self._get(url)

    async def close(self) -> None:
        """세션 정리"""
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None


class GitRepository(RepositoryBase):
    """Git 얕은 복제 기반 저장소 클래스"""

    def __init__(self, settings):
        """
        Git 저장소 초기화

        Args:
            settings: 시스템 설정
        """
        super().__init__(settings)
        self.checkout_root = Path(settings.git_checkout_dir)
        self._checkouts: dict[tuple[str, str], Path] = {}

    def _checkout_path(self, source: str, branch: str) -> Path:
        """저장소별 작업 사본 경로"""
        repo_path = parse_repository_path(source)
        return self.checkout_root / f"{repo_path.replace('/', '__')}@{branch}"

    async def _ensure_checkout(self, source: str, branch: str) -> Path:
        """작업 사본 준비 (refresh 호출 사이에는 저장소/브랜치별 한 번만 갱신)"""
        key = (source, branch)
        if key in self._checkouts:
            return self._checkouts[key]

        local_path = self._checkout_path(source, branch)
        if (local_path / ".git").exists():
            try:
                repo = git.Repo(local_path)
                repo.remotes.origin.pull()
                self.logger.info(f"저장소 업데이트 완료: {source}")
            except git.GitError as e:
                self.logger.error(f"저장소 업데이트 실패, 다시 복제합니다: {e}")
                self._clone_fresh(source, branch, local_path)
        else:
            self._clone_fresh(source, branch, local_path)

        self._checkouts[key] = local_path
        return local_path

    def _clone_fresh(self, source: str, branch: str, local_path: Path) -> None:
        """새로운 저장소 복제"""
        try:
            if local_path.exists():
                shutil.rmtree(local_path)
            local_path.parent.mkdir(parents=True, exist_ok=True)
            git.Repo.clone_from(source, local_path, depth=1, branch=branch)
            self.logger.info(f"저장소 복제 완료: {source} ({branch})")
        except git.GitError as e:
            record_fetch_error("fetch_failed")
            raise FetchFailedException(source, f"저장소 복제 실패: {e}") from e

    def _inside(self, checkout: Path, path: str) -> Path:
        """작업 사본 내부 경로 확인"""
        target = (checkout / path.strip('/')).resolve()
        if target != checkout.resolve() and checkout.resolve() not in target.parents:
            raise FetchFailedException(path, "작업 사본 밖의 경로입니다")
        return target

    async def list_directory(self, source: str, path: str, branch: Optional[str] = None) -> list[RemoteEntry]:
        """작업 사본에서 메타데이터 파일 목록 조회"""
        checkout = await self._ensure_checkout(source, self._branch(branch))
        directory = self._inside(checkout, path)
        if not directory.is_dir():
            raise FetchFailedException(f"{source}/{path}", "디렉토리를 찾을 수 없습니다", 404)

        return [
            RemoteEntry(name=entry.name, path=f"{path.strip('/')}/{entry.name}")
            for entry in sorted(directory.iterdir())
            if entry.is_file() and entry.name.endswith(self.metadata_extension)
        ]

    async def fetch_raw(self, source: str, branch: Optional[str], path: str) -> bytes:
        """작업 사본에서 원본 파일 읽기"""
        checkout = await self._ensure_checkout(source, self._branch(branch))
        target = self._inside(checkout, path)
        if not target.is_file():
            raise FetchFailedException(f"{source}/{path}", "파일을 찾을 수 없습니다", 404)
        return target.read_bytes()

    def refresh(self) -> None:
        """다음 조회 시 작업 사본을 다시 갱신하도록 표시"""
        self._checkouts.clear()

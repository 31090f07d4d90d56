"""
예외 클래스 정의 모듈

스크립트 동기화 시스템에서 사용되는 커스텀 예외들을 정의합니다.
"""

from typing import Optional


class ScriptSyncException(Exception):
    """스크립트 동기화 시스템 기본 예외 클래스"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        """
        예외 초기화

        Args:
            message: 오류 메시지
            error_code: 오류 코드 (선택사항)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class InvalidSourceIdentifierException(ScriptSyncException):
    """원격 저장소 식별자(URL) 형식이 잘못되었을 때 발생하는 예외"""

    def __init__(self, identifier: str):
        """
        잘못된 저장소 식별자 예외 초기화

        Args:
            identifier: 잘못된 저장소 식별자
        """
        message = f"유효하지 않은 GitHub 저장소 URL입니다: {identifier}"
        super().__init__(message, "INVALID_SOURCE_IDENTIFIER")
        self.identifier = identifier


class FetchFailedException(ScriptSyncException):
    """원격 저장소 조회/다운로드 실패 시 발생하는 예외"""

    def __init__(self, url: str, error_detail: str, status: Optional[int] = None):
        """
        원격 조회 실패 예외 초기화

        Args:
            url: 요청 URL
            error_detail: 오류 상세 정보
            status: HTTP 상태 코드 (있는 경우)
        """
        status_info = f" (HTTP {status})" if status is not None else ""
        message = f"원격 조회 실패{status_info}: {url} - {error_detail}"
        super().__init__(message, "FETCH_FAILED")
        self.url = url
        self.error_detail = error_detail
        self.status = status


class RateLimitedException(FetchFailedException):
    """GitHub 요청 한도 초과(HTTP 403) 시 발생하는 예외"""

    hint = "요청 한도를 늘리려면 GITHUB_TOKEN 환경 변수를 설정하세요"

    def __init__(self, url: str, status: int = 403):
        """
        요청 한도 초과 예외 초기화

        Args:
            url: 요청 URL
            status: HTTP 상태 코드
        """
        super().__init__(url, f"GitHub 요청 한도 초과. {self.hint}", status)
        self.error_code = "RATE_LIMITED"


class ParseFailedException(ScriptSyncException):
    """메타데이터 파싱 실패 시 발생하는 예외"""

    def __init__(self, location: str, error_detail: str):
        """
        메타데이터 파싱 예외 초기화

        Args:
            location: 파일 이름 또는 원격 경로
            error_detail: 오류 상세 정보
        """
        message = f"메타데이터 파싱 실패: {location} - {error_detail}"
        super().__init__(message, "PARSE_FAILED")
        self.location = location
        self.error_detail = error_detail


class PathValidationException(ScriptSyncException):
    """에셋 경로 검증 실패 시 발생하는 예외"""

    def __init__(self, path: str, error_detail: str):
        """
        경로 검증 예외 초기화

        Args:
            path: 검증한 경로
            error_detail: 오류 상세 정보
        """
        message = f"잘못된 경로: {path} - {error_detail}"
        super().__init__(message, "PATH_VALIDATION_FAILED")
        self.path = path
        self.error_detail = error_detail


class WriteFailedException(ScriptSyncException):
    """로컬 저장소 쓰기 실패 시 발생하는 예외"""

    def __init__(self, path: str, error_detail: str):
        """
        쓰기 실패 예외 초기화

        Args:
            path: 쓰기 대상 경로
            error_detail: 오류 상세 정보
        """
        message = f"파일 쓰기 실패: {path} - {error_detail}"
        super().__init__(message, "WRITE_FAILED")
        self.path = path
        self.error_detail = error_detail


class SourceNotFoundException(ScriptSyncException):
    """등록되지 않은 저장소를 요청했을 때 발생하는 예외"""

    def __init__(self, identifier: str):
        """
        저장소 찾기 실패 예외 초기화

        Args:
            identifier: 저장소 식별자
        """
        message = f"등록된 저장소를 찾을 수 없습니다: {identifier}"
        super().__init__(message, "SOURCE_NOT_FOUND")
        self.identifier = identifier


class ConfigurationException(ScriptSyncException):
    """설정 오류 시 발생하는 예외"""

    def __init__(self, config_key: str, error_detail: str):
        """
        설정 예외 초기화

        Args:
            config_key: 설정 키
            error_detail: 오류 상세 정보
        """
        message = f"설정 오류: {config_key} - {error_detail}"
        super().__init__(message, "CONFIGURATION_ERROR")
        self.config_key = config_key
        self.error_detail = error_detail


class ScriptNotFoundException(ScriptSyncException):
    """슬러그에 해당하는 스크립트를 찾을 수 없을 때 발생하는 예외"""

    def __init__(self, slug: str):
        """
        스크립트 찾기 실패 예외 초기화

        Args:
            slug: 스크립트 슬러그
        """
        message = f"스크립트를 찾을 수 없습니다: {slug}"
        super().__init__(message, "SCRIPT_NOT_FOUND")
        self.slug = slug

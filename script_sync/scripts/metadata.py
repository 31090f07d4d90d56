"""
스크립트 메타데이터 관리 모듈

메타데이터 JSON 문서를 레코드 모델로 파싱하고 저장용 텍스트로 직렬화합니다.
"""

import json
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from ..exceptions import ParseFailedException
from ..models.base import ScriptRecord
from ..utils.logging import get_logger

logger = get_logger(__name__)


class MetadataParser:
    """스크립트 메타데이터 파서"""

    def __init__(self, settings=None):
        """
        메타데이터 파서 초기화

        Args:
            settings: 시스템 설정 객체 (선택사항)
        """
        self.settings = settings
        self.logger = logger

    def parse_content(self, content: Union[bytes, str], location: str) -> ScriptRecord:
        """
        메타데이터 본문 파싱

        Args:
            content: JSON 본문 (bytes 또는 str)
            location: 오류 메시지에 표시할 위치 (파일 이름 또는 원격 경로)

        Returns:
            파싱된 메타데이터 레코드

        Raises:
            ParseFailedException: JSON 형식이나 필수 필드가 잘못되었을 때
        """
        try:
            if isinstance(content, bytes):
                content = content.decode('utf-8')
            document = json.loads(content)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseFailedException(location, f"JSON 파싱 오류: {e}") from e

        return self.parse_document(document, location)

    def parse_document(self, document: Any, location: str) -> ScriptRecord:
        """
        이미 디코딩된 JSON 문서를 레코드로 변환

        Raises:
            ParseFailedException: 객체가 아니거나 필수 필드가 없을 때
        """
        if not isinstance(document, dict):
            raise ParseFailedException(location, "JSON 객체가 아닙니다")

        try:
            return ScriptRecord.model_validate(document)
        except ValidationError as e:
            raise ParseFailedException(location, f"필수 필드 검증 실패: {e.errors()[0]['loc']}") from e

    def parse_metadata_file(self, metadata_path: Path) -> ScriptRecord:
        """
        메타데이터 파일 파싱

        Args:
            metadata_path: 메타데이터 파일 경로

        Returns:
            파싱된 메타데이터 레코드

        Raises:
            FileNotFoundError: 메타데이터 파일이 없을 때
            ParseFailedException: 메타데이터 형식이 잘못되었을 때
        """
        if not metadata_path.exists():
            raise FileNotFoundError(f"메타데이터 파일을 찾을 수 없습니다: {metadata_path}")

        return self.parse_content(metadata_path.read_bytes(), metadata_path.name)

    def dumps(self, record: ScriptRecord) -> bytes:
        """
        레코드를 저장용 JSON으로 직렬화 (들여쓰기 2칸)

        Args:
            record: 메타데이터 레코드

        Returns:
            UTF-8 인코딩된 JSON 본문
        """
        return json.dumps(record.to_document(), indent=2, ensure_ascii=False, default=str).encode('utf-8')

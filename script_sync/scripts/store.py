"""
로컬 아티팩트 저장소 모듈

로컬 루트 아래의 메타데이터 JSON 파일(슬러그당 하나)과 카테고리별 에셋 파일을
읽고 씁니다. 단일 프로세스만 쓴다고 가정하며 프로세스 간 잠금은 없습니다.

디렉토리 구조:
    <root>/json/<slug>.json
    <root>/ct/<file>
    <root>/tools/<sub>/<file>
    <root>/vm/<sub>/<file>
    <root>/install/<file>
"""

from pathlib import Path
from typing import Optional, Union

from ..exceptions import PathValidationException, WriteFailedException
from ..models.base import ScriptRecord
from ..utils.helpers import atomic_write, ensure_directory
from ..utils.logging import get_logger
from .metadata import MetadataParser
from .resolver import validate_path

logger = get_logger(__name__)


class LocalArtifactStore:
    """로컬 메타데이터/에셋 저장소"""

    def __init__(
        self,
        root: Union[str, Path],
        metadata_extension: str = ".json",
        parser: Optional[MetadataParser] = None
    ):
        """
        로컬 저장소 초기화

        Args:
            root: 저장소 루트 디렉토리
            metadata_extension: 메타데이터 파일 확장자
            parser: 메타데이터 파서 (없으면 기본 파서)
        """
        self.root = Path(root)
        self.metadata_extension = metadata_extension
        self.parser = parser or MetadataParser()
        self.logger = logger

    @property
    def metadata_dir(self) -> Path:
        """메타데이터 디렉토리"""
        return self.root / "json"

    def filename_for(self, slug: str) -> str:
        """슬러그로부터 메타데이터 파일 이름 생성"""
        return f"{slug}{self.metadata_extension}"

    def slug_for(self, filename: str) -> str:
        """메타데이터 파일 이름으로부터 슬러그 추출"""
        if filename.endswith(self.metadata_extension):
            return filename[:-len(self.metadata_extension)]
        return filename

    # 메타데이터

    def list_metadata_files(self) -> list[str]:
        """
        로컬 메타데이터 파일 이름 목록

        Returns:
            확장자가 일치하는 파일 이름 목록 (정렬됨, 디렉토리가 없으면 빈 목록)
        """
        if not self.metadata_dir.is_dir():
            return []

        return sorted(
            entry.name
            for entry in self.metadata_dir.iterdir()
            if entry.is_file() and entry.name.endswith(self.metadata_extension)
        )

    def metadata_path(self, filename: str) -> Path:
        """메타데이터 파일 경로"""
        if "/" in filename or "\\" in filename or filename in ("", ".", ".."):
            raise PathValidationException(filename, "메타데이터 파일 이름에 경로 구분자를 사용할 수 없습니다")
        return self.metadata_dir / filename

    def has_metadata(self, filename: str) -> bool:
        """메타데이터 파일 존재 여부"""
        return self.metadata_path(filename).is_file()

    def read_record(self, filename: str) -> ScriptRecord:
        """
        메타데이터 레코드 읽기

        Raises:
            FileNotFoundError: 파일이 없을 때
            ParseFailedException: 파일을 파싱할 수 없을 때
        """
        return self.parser.parse_metadata_file(self.metadata_path(filename))

    def write_record(self, record: ScriptRecord, filename: Optional[str] = None) -> str:
        """
        메타데이터 레코드 쓰기 (슬러그 기반 파일 이름)

        Args:
            record: 저장할 레코드
            filename: 저장할 파일 이름 (없으면 슬러그 기반 이름)

        Returns:
            저장된 파일 이름

        Raises:
            WriteFailedException: 파일 쓰기 실패 시
        """
        filename = filename or self.filename_for(record.slug)
        path = self.metadata_path(filename)

        try:
            atomic_write(path, self.parser.dumps(record))
        except OSError as e:
            raise WriteFailedException(str(path), str(e)) from e

        self.logger.debug(f"메타데이터 저장: {filename}")
        return filename

    def delete_metadata(self, filename: str) -> bool:
        """
        메타데이터 파일 삭제

        Returns:
            삭제 여부 (파일이 없었으면 False)
        """
        path = self.metadata_path(filename)
        if not path.exists():
            return False
        path.unlink()
        return True

    # 에셋

    def asset_path(self, relative_path: str) -> Path:
        """
        에셋 파일 경로 (루트 밖을 가리키는 경로는 거부)

        Raises:
            PathValidationException: 중첩 세그먼트나 루트 밖 경로일 때
        """
        validate_path(relative_path)
        path = (self.root / relative_path).resolve()
        root = self.root.resolve()
        if root not in path.parents:
            raise PathValidationException(relative_path, "저장소 루트 밖의 경로입니다")
        return path

    def asset_exists(self, relative_path: str) -> bool:
        """에셋 파일 존재 여부"""
        return self.asset_path(relative_path).is_file()

    def read_asset(self, relative_path: str) -> str:
        """
        에셋 파일 읽기

        Raises:
            FileNotFoundError: 파일이 없을 때
        """
        return self.asset_path(relative_path).read_text(encoding='utf-8')

    def write_asset(self, relative_path: str, content: str) -> Path:
        """
        에셋 파일 쓰기

        Raises:
            WriteFailedException: 파일 쓰기 실패 시
        """
        path = self.asset_path(relative_path)

        try:
            ensure_directory(path.parent)
            atomic_write(path, content.encode('utf-8'))
        except OSError as e:
            raise WriteFailedException(str(path), str(e)) from e

        return path

    def delete_asset(self, relative_path: str) -> bool:
        """
        에셋 파일 삭제

        Returns:
            삭제 여부 (파일이 없었으면 False)
        """
        path = self.asset_path(relative_path)
        if not path.exists():
            return False
        path.unlink()
        return True

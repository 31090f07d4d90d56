"""
로컬 저장소 및 메타데이터 캐시 테스트
"""

import json

import pytest

from conftest import SOURCE_A, SOURCE_B, metadata_bytes
from script_sync.exceptions import ParseFailedException, PathValidationException
from script_sync.models.base import ScriptRecord
from script_sync.scripts.cache_manager import MetadataCache
from script_sync.scripts.metadata import MetadataParser
from script_sync.scripts.store import LocalArtifactStore


@pytest.fixture
def store(tmp_path):
    return LocalArtifactStore(tmp_path / "scripts")


class TestMetadataParser:
    """메타데이터 파서 테스트"""

    @pytest.fixture
    def parser(self):
        return MetadataParser()

    def test_parse_remote_document(self, parser):
        """원격 문서 파싱"""
        record = parser.parse_content(metadata_bytes("redis"), "redis.json")

        assert record.slug == "redis"
        assert record.script_type == "ct"
        assert record.asset_references[0].path == "ct/redis.sh"

    @pytest.mark.parametrize("content", [b"{oops", b"[]", b'{"name": "no slug"}', b'{"slug": ""}'])
    def test_invalid_document(self, parser, content):
        """잘못된 문서"""
        with pytest.raises(ParseFailedException) as exc_info:
            parser.parse_content(content, "bad.json")

        assert "bad.json" in exc_info.value.message

    def test_file_not_found(self, parser, tmp_path):
        """파일 없음"""
        with pytest.raises(FileNotFoundError) as exc_info:
            parser.parse_metadata_file(tmp_path / "missing.json")

        assert "메타데이터 파일을 찾을 수 없습니다" in str(exc_info.value)

    def test_serialize_indented_with_remote_names(self, parser):
        """직렬화는 들여쓰기와 원본 필드 이름 사용"""
        record = parser.parse_content(metadata_bytes("redis", logo="redis.png"), "redis.json")
        record.source_origin = SOURCE_A

        text = parser.dumps(record).decode("utf-8")
        document = json.loads(text)

        assert text.startswith('{\n  "slug"')
        assert document["repository_url"] == SOURCE_A
        assert document["install_methods"][0]["script"] == "ct/redis.sh"
        assert document["logo"] == "redis.png"


class TestLocalArtifactStore:
    """로컬 저장소 테스트"""

    def test_write_and_read_record(self, store):
        """레코드 쓰기 읽기"""
        filename = store.write_record(ScriptRecord(slug="redis", name="Redis", source_origin=SOURCE_A))

        assert filename == "redis.json"
        assert store.has_metadata("redis.json")
        assert store.read_record("redis.json").name == "Redis"
        assert store.list_metadata_files() == ["redis.json"]

    def test_no_temporary_files_left(self, store):
        """임시 파일이 남지 않음"""
        store.write_record(ScriptRecord(slug="redis", source_origin=SOURCE_A))
        store.write_record(ScriptRecord(slug="redis", source_origin=SOURCE_B))

        assert [p.name for p in store.metadata_dir.iterdir()] == ["redis.json"]
        assert store.read_record("redis.json").source_origin == SOURCE_B

    def test_empty_listing_without_directory(self, store):
        """디렉토리가 없으면 빈 목록"""
        assert store.list_metadata_files() == []

    def test_listing_filters_by_extension(self, store):
        """목록은 확장자로 필터링"""
        store.metadata_dir.mkdir(parents=True)
        (store.metadata_dir / "b.json").write_text("{}")
        (store.metadata_dir / "a.json").write_text("{}")
        (store.metadata_dir / "notes.txt").write_text("")

        assert store.list_metadata_files() == ["a.json", "b.json"]

    @pytest.mark.parametrize("filename", ["../escape.json", "sub/x.json", ".."])
    def test_metadata_filename_validation(self, store, filename):
        """메타데이터 파일 이름 검증"""
        with pytest.raises(PathValidationException):
            store.metadata_path(filename)

    def test_delete_metadata(self, store):
        """메타데이터 삭제"""
        store.write_record(ScriptRecord(slug="redis", source_origin=SOURCE_A))

        assert store.delete_metadata("redis.json") is True
        assert store.delete_metadata("redis.json") is False

    def test_write_read_delete_asset(self, store):
        """에셋 쓰기 읽기 삭제"""
        path = store.write_asset("tools/addon/netdata.sh", "#!/bin/bash\n")

        assert path.is_file()
        assert store.asset_exists("tools/addon/netdata.sh")
        assert store.read_asset("tools/addon/netdata.sh") == "#!/bin/bash\n"
        assert store.delete_asset("tools/addon/netdata.sh") is True
        assert not store.asset_exists("tools/addon/netdata.sh")

    @pytest.mark.parametrize("path", ["../outside.sh", "ct/ct/redis.sh"])
    def test_asset_path_validation(self, store, path):
        """에셋 경로 검증"""
        with pytest.raises(PathValidationException):
            store.write_asset(path, "x")


class TestMetadataCache:
    """메타데이터 캐시 테스트"""

    def test_lazy_load(self, store):
        """지연 로드"""
        store.write_record(ScriptRecord(slug="redis", source_origin=SOURCE_A))
        cache = MetadataCache(store)

        assert "redis" not in cache
        assert cache.get("redis").source_origin == SOURCE_A
        assert "redis" in cache
        assert len(cache) == 1

    def test_missing_slug(self, store):
        """없는 슬러그"""
        assert MetadataCache(store).get("missing") is None

    def test_returns_copy(self, store):
        """호출자가 반환값을 수정해도 캐시에는 영향 없음"""
        store.write_record(ScriptRecord(slug="redis", name="Redis", source_origin=SOURCE_A))
        cache = MetadataCache(store)

        first = cache.get("redis")
        first.name = "changed"

        assert cache.get("redis").name == "Redis"

    def test_reload_after_invalidate(self, store):
        """무효화 후 다시 로드"""
        store.write_record(ScriptRecord(slug="redis", source_origin=SOURCE_B))
        cache = MetadataCache(store)
        assert cache.get("redis").source_origin == SOURCE_B

        store.write_record(ScriptRecord(slug="redis", source_origin=SOURCE_A))
        assert cache.get("redis").source_origin == SOURCE_B

        cache.invalidate("redis")
        assert cache.get("redis").source_origin == SOURCE_A

    def test_legacy_record_patched_in_memory_only(self, store):
        """레거시 레코드는 메모리에서만 보정"""
        store.metadata_dir.mkdir(parents=True)
        (store.metadata_dir / "legacy.json").write_text(json.dumps({"slug": "legacy"}))
        cache = MetadataCache(store, default_origin=SOURCE_A)

        assert cache.get("legacy").source_origin == SOURCE_A
        assert store.read_record("legacy.json").source_origin is None

    def test_broken_file_is_none(self, store):
        """깨진 파일은 None"""
        store.metadata_dir.mkdir(parents=True)
        (store.metadata_dir / "broken.json").write_text("{")

        assert MetadataCache(store).get("broken") is None

"""
API 테스트 모듈

FastAPI 엔드포인트를 테스트합니다.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import SOURCE_A, SOURCE_B
from script_sync.api.main import create_app
from script_sync.api.models import SyncSourceRequest
from script_sync.scripts.downloader import ScriptDownloader


class TestAPIModels:
    """API 모델 테스트"""

    def test_source_url_validation(self):
        """저장소 URL 검증"""
        assert SyncSourceRequest(identifier=f"{SOURCE_A}/").identifier == SOURCE_A

        with pytest.raises(ValueError):
            SyncSourceRequest(identifier="https://gitlab.com/owner/repo")


class TestAPIEndpoints:
    """API 엔드포인트 테스트"""

    @pytest.fixture
    def downloader(self, settings, fake_repository):
        fake_repository.add_metadata(SOURCE_A, "redis")
        fake_repository.add_metadata(SOURCE_B, "postgres")
        fake_repository.add_file(SOURCE_A, "ct/redis.sh", "#!/bin/bash\necho 1\n")
        return ScriptDownloader(settings, client=fake_repository)

    @pytest.fixture
    def client(self, settings, downloader):
        app = create_app(settings, downloader=downloader)
        with TestClient(app) as client:
            yield client

    def test_root_endpoint(self, client):
        """루트 엔드포인트"""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "스크립트 동기화 API"
        assert data["version"] == "1.0.0"

    def test_sync_all(self, client):
        """전체 동기화"""
        response = client.post("/sync")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["count"] == 2
        assert sorted(data["syncedKeys"]) == ["postgres.json", "redis.json"]
        assert "listed_keys" not in data

    def test_sync_single_source(self, client):
        """단일 저장소 동기화"""
        response = client.post("/sync/source", json={"identifier": SOURCE_B})

        assert response.status_code == 200
        assert response.json()["syncedKeys"] == ["postgres.json"]

    def test_sync_single_source_invalid_url(self, client):
        """단일 저장소 동기화 잘못된 URL"""
        response = client.post("/sync/source", json={"identifier": "not-a-repo"})

        assert response.status_code == 422

    def test_remove_source(self, client):
        """저장소 삭제"""
        client.post("/sync")

        response = client.delete("/sources", params={"identifier": SOURCE_B})

        assert response.status_code == 200
        data = response.json()
        assert data["removed_files"] == ["postgres.json"]
        assert data["count"] == 1

    def test_remove_source_invalid_url(self, client):
        """저장소 삭제 잘못된 URL"""
        response = client.delete("/sources", params={"identifier": "https://example.com/x"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SOURCE_IDENTIFIER"

    def test_list_and_get_scripts(self, client):
        """스크립트 목록과 조회"""
        client.post("/sync")

        listing = client.get("/scripts").json()
        detail = client.get("/scripts/redis").json()

        assert listing["total"] == 2
        assert [card["slug"] for card in listing["scripts"]] == ["postgres", "redis"]
        assert detail["slug"] == "redis"
        assert detail["repository_url"] == SOURCE_A
        assert detail["install_methods"][0]["script"] == "ct/redis.sh"

    def test_missing_script(self, client):
        """없는 스크립트"""
        response = client.get("/scripts/missing")

        assert response.status_code == 404
        assert response.json()["code"] == "SCRIPT_NOT_FOUND"

    def test_load_compare_diff(self, client, fake_repository):
        """다운로드 비교 diff"""
        client.post("/sync")

        loaded = client.post("/scripts/redis/load").json()
        status = client.get("/scripts/redis/status").json()
        fake_repository.add_file(SOURCE_A, "ct/redis.sh", "#!/bin/bash\necho 2\n")
        compared = client.get("/scripts/redis/compare").json()
        diff = client.get("/scripts/redis/diff", params={"file_path": "ct/redis.sh"}).json()
        deleted = client.delete("/scripts/redis/files").json()

        assert loaded["success"] is True
        assert status["primary_exists"] is True
        assert compared["differences"] == ["ct/redis.sh"]
        assert "+2: echo 2\n" in diff["diff"]
        assert diff["local_content"] == "#!/bin/bash\necho 1\n"
        assert deleted["deleted_files"] == ["ct/redis.sh"]

    def test_health_check(self, client):
        """헬스 체크"""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["components"]["sources"] == "2 enabled"
        assert data["components"]["backend"] == "github"

    def test_metrics(self, client):
        """메트릭"""
        client.post("/sync")

        response = client.get("/metrics")
        summary = client.get("/metrics/summary").json()

        assert response.status_code == 200
        assert "script_sync_items_total" in response.text
        assert summary["sync_items"]["synced"] >= 2


class TestAppLifecycle:
    """앱 생명주기 테스트"""

    def test_startup_creates_downloader(self, settings):
        """시작 시 인스턴스 생성"""
        app = create_app(settings)

        with TestClient(app) as client:
            assert isinstance(app.state.downloader, ScriptDownloader)
            assert client.get("/").status_code == 200

        assert app.state.downloader is None

"""
명령줄 인터페이스 테스트
"""

import json
from unittest.mock import patch

import pytest

from conftest import SOURCE_A, SOURCE_B
from script_sync.cli import main
from script_sync.exceptions import ConfigurationException
from script_sync.scripts.downloader import ScriptDownloader


@pytest.fixture
def run_cli(settings, fake_repository):
    """가짜 저장소 클라이언트로 CLI 실행"""

    def run(*argv):
        with patch("script_sync.cli.get_settings", return_value=settings), \
                patch("script_sync.cli.setup_logging"), \
                patch("script_sync.cli.ScriptDownloader",
                      side_effect=lambda s: ScriptDownloader(s, client=fake_repository)):
            return main(list(argv))

    return run


class TestCLI:
    """CLI 명령 테스트"""

    def test_sync_all(self, run_cli, fake_repository, capsys):
        """전체 동기화"""
        fake_repository.add_metadata(SOURCE_A, "redis")
        fake_repository.add_metadata(SOURCE_B, "postgres")

        exit_code = run_cli("sync")
        output = json.loads(capsys.readouterr().out)

        assert exit_code == 0
        assert output["count"] == 2
        assert sorted(output["syncedKeys"]) == ["postgres.json", "redis.json"]

    def test_sync_single_source(self, run_cli, fake_repository, capsys):
        """단일 저장소 동기화"""
        fake_repository.add_metadata(SOURCE_B, "postgres")

        exit_code = run_cli("sync", "--source", f"{SOURCE_B}/")

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)["syncedKeys"] == ["postgres.json"]

    def test_rate_limited_exit_code(self, run_cli, fake_repository, capsys):
        """요청 한도 초과는 실패 코드"""
        fake_repository.rate_limited.add(SOURCE_A)

        exit_code = run_cli("sync", "--source", SOURCE_A)
        output = json.loads(capsys.readouterr().out)

        assert exit_code == 1
        assert output["success"] is False
        assert "GITHUB_TOKEN" in output["message"]

    def test_invalid_source_url(self, run_cli, capsys):
        """잘못된 저장소 URL"""
        exit_code = run_cli("remove-source", "https://example.com/repo")

        assert exit_code == 1
        assert "유효하지 않은 GitHub 저장소 URL" in capsys.readouterr().err

    def test_diff(self, run_cli, fake_repository, capsys):
        fake_repository.add_metadata(SOURCE_A, "redis")
        fake_repository.add_file(SOURCE_A, "ct/redis.sh", "#!/bin/bash\necho 1\n")
        run_cli("sync")
        run_cli("load", "redis")
        fake_repository.add_file(SOURCE_A, "ct/redis.sh", "#!/bin/bash\necho 2\n")
        capsys.readouterr()

        exit_code = run_cli("diff", "redis", "ct/redis.sh")
        output = capsys.readouterr().out

        assert exit_code == 0
        assert " 1: #!/bin/bash\n" in output
        assert "-2: echo 1\n" in output
        assert "+2: echo 2\n" in output

    def test_diff_missing_script(self, run_cli, capsys):
        """diff 없는 스크립트"""
        exit_code = run_cli("diff", "missing", "ct/missing.sh")

        assert exit_code == 1
        assert "missing" in capsys.readouterr().err

    def test_remove_source(self, run_cli, fake_repository, capsys):
        """저장소 삭제"""
        fake_repository.add_metadata(SOURCE_B, "postgres")
        run_cli("sync")
        capsys.readouterr()

        exit_code = run_cli("remove-source", SOURCE_B)
        output = json.loads(capsys.readouterr().out)

        assert exit_code == 0
        assert output["removed_files"] == ["postgres.json"]

    def test_configuration_error(self, capsys):
        """설정 오류"""
        error = ConfigurationException("REPOSITORIES", "최소 하나의 저장소가 필요합니다")
        with patch("script_sync.cli.get_settings", side_effect=error):
            exit_code = main(["sync"])

        assert exit_code == 2
        assert "REPOSITORIES" in capsys.readouterr().err

    def test_command_required(self):
        """명령 필수"""
        with pytest.raises(SystemExit):
            main([])

"""
유틸리티 함수 테스트 모듈

공통 유틸리티 함수와 로깅, 메트릭 모듈을 테스트합니다.
"""

import logging
from unittest.mock import patch

import pytest

from script_sync.config.settings import Settings
from script_sync.monitoring.metrics import (
    get_metrics_summary,
    record_comparison,
    record_fetch_error,
    record_sync_item,
)
from script_sync.utils.helpers import atomic_write, ensure_directory, format_duration
from script_sync.utils.logging import KoreanFormatter, get_logger, setup_logging, source_logger


class TestFileUtils:
    """파일 유틸리티 테스트"""

    def test_ensure_directory(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"

        result = ensure_directory(target)

        assert result == target
        assert target.is_dir()
        # 이미 있어도 오류 없음
        ensure_directory(target)

    def test_atomic_write(self, tmp_path):
        target = tmp_path / "json" / "redis.json"

        atomic_write(target, b'{"slug": "redis"}')
        atomic_write(target, b'{"slug": "redis", "name": "Redis"}')

        assert target.read_bytes() == b'{"slug": "redis", "name": "Redis"}'
        # 임시 파일이 남지 않음
        assert [p.name for p in target.parent.iterdir()] == ["redis.json"]

    def test_atomic_write_failure_keeps_original(self, tmp_path):
        """교체 실패 시 기존 파일 유지, 임시 파일 정리"""
        target = tmp_path / "redis.json"
        target.write_bytes(b"original")

        with patch("script_sync.utils.helpers.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                atomic_write(target, b"new")

        assert target.read_bytes() == b"original"
        assert [p.name for p in tmp_path.iterdir()] == ["redis.json"]


class TestFormatUtils:
    """포맷 유틸리티 테스트"""

    def test_format_duration(self):
        assert format_duration(5.3) == "5.3초"
        assert format_duration(125) == "2분 5.0초"
        assert format_duration(3725) == "1시간 2분 5.0초"


class TestLogging:
    """로깅 시스템 테스트"""

    def test_get_logger_prefix(self):
        assert get_logger("tests").name == "script_sync.tests"
        assert get_logger("script_sync.scripts.sync").name == "script_sync.scripts.sync"
        assert get_logger("script_sync").name == "script_sync"

    def test_korean_formatter(self):
        formatter = KoreanFormatter(fmt="%(levelname)s - %(message)s")
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "경고 메시지", None, None)

        assert formatter.format(record) == "경고 - 경고 메시지"
        # 원래 레벨명 복원
        assert record.levelname == "WARNING"

    def test_source_logger(self):
        """저장소 경로가 메시지 앞에 붙음"""
        adapter = source_logger(get_logger("tests"), "https://github.com/alpha/scripts/")

        msg, kwargs = adapter.process("다운로드 실패", {})

        assert msg == "[alpha/scripts] 다운로드 실패"
        assert kwargs == {}

    def test_setup_logging(self, tmp_path):
        log_file = tmp_path / "logs" / "sync.log"
        settings = Settings(
            scripts_dir=str(tmp_path), log_level="DEBUG", log_file=str(log_file), log_backup_count=2
        )

        logger = setup_logging(settings)
        try:
            assert logger.name == "script_sync"
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 2
            assert logger.propagate is False

            # 재설정 시 핸들러 중복 없음
            setup_logging(settings)
            assert len(logger.handlers) == 2
            assert logger.handlers[1].backupCount == 2
            assert logging.getLogger("git").level == logging.WARNING
            assert log_file.exists()
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()
            logger.propagate = True


class TestMetrics:
    """메트릭 테스트"""

    def test_summary(self):
        before = get_metrics_summary()

        record_sync_item("https://github.com/alpha/scripts", "synced", 3)
        record_sync_item("https://github.com/alpha/scripts", "skipped", 0)
        record_fetch_error("rate_limited")
        record_comparison("different")

        after = get_metrics_summary()

        assert after["sync_items"]["synced"] == before["sync_items"].get("synced", 0) + 3
        assert after["sync_items"].get("skipped", 0) == before["sync_items"].get("skipped", 0)
        assert after["fetch_errors"]["rate_limited"] == before["fetch_errors"].get("rate_limited", 0) + 1
        assert after["comparisons"]["different"] == before["comparisons"].get("different", 0) + 1

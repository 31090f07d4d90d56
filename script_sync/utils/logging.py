"""
로깅 시스템 모듈

한국어 레벨명을 쓰는 script_sync 로거 계층을 설정합니다. 저장소별 작업
로그에는 SourceLoggerAdapter로 저장소 경로(owner/repo)를 붙입니다.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from ..config.settings import Settings

ROOT_LOGGER_NAME = "script_sync"

# 디버그 레벨에서 지나치게 많은 로그를 남기는 라이브러리 로거
NOISY_LIBRARY_LOGGERS = ("git", "aiohttp.access", "aiohttp.client", "urllib3")


class KoreanFormatter(logging.Formatter):
    """레벨명을 한국어로 바꿔 출력하는 포맷터"""

    level_names = {
        'DEBUG': '디버그',
        'INFO': '정보',
        'WARNING': '경고',
        'ERROR': '오류',
        'CRITICAL': '치명적'
    }

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = self.level_names.get(original, original)
        try:
            return super().format(record)
        finally:
            record.levelname = original


class SourceLoggerAdapter(logging.LoggerAdapter):
    """메시지 앞에 저장소 경로를 붙이는 로거 어댑터"""

    def process(self, msg, kwargs):
        return f"[{self.extra['source']}] {msg}", kwargs


def source_logger(logger: logging.Logger, source_identifier: str) -> SourceLoggerAdapter:
    """
    저장소 URL에서 owner/repo 부분만 남긴 어댑터 생성

    Args:
        logger: 기반 로거
        source_identifier: 저장소 URL

    Returns:
        SourceLoggerAdapter: 저장소 경로가 붙는 로거
    """
    source = source_identifier.rstrip("/").split("github.com/", 1)[-1]
    return SourceLoggerAdapter(logger, {"source": source})


def _build_handlers(settings: Settings, formatter: logging.Formatter) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if settings.log_file:
        log_file_path = Path(settings.log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding='utf-8'
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings) -> logging.Logger:
    """
    script_sync 로거 설정

    다시 호출하면 기존 핸들러를 닫고 교체하므로 API 서버 재시작이나 CLI
    반복 실행에서도 로그가 중복되지 않습니다.

    Args:
        settings: 시스템 설정 객체

    Returns:
        logging.Logger: 설정된 루트 로거
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = KoreanFormatter(fmt=settings.log_format, datefmt='%Y-%m-%d %H:%M:%S')
    for handler in _build_handlers(settings, formatter):
        logger.addHandler(handler)

    logger.propagate = False

    for name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(f"로깅 설정 완료 (레벨: {settings.log_level}, 파일: {settings.log_file or '없음'})")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    script_sync 계층 아래의 로거 반환

    Args:
        name: 로거 이름 (보통 __name__)
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

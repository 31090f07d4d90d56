"""
유틸리티 패키지

공통으로 사용되는 유틸리티 함수들을 포함합니다.
"""

from .helpers import atomic_write, ensure_directory, format_duration
from .logging import get_logger, setup_logging, source_logger

__all__ = [
    "setup_logging",
    "get_logger",
    "source_logger",
    "atomic_write",
    "ensure_directory",
    "format_duration",
]

"""
공통 유틸리티 함수 모듈

스크립트 동기화 시스템에서 공통으로 사용되는 헬퍼 함수들을 제공합니다.
"""

import os
import uuid
from pathlib import Path
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    디렉토리 존재 확인 및 생성

    Args:
        path: 디렉토리 경로

    Returns:
        Path: 디렉토리 경로 객체
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(path: Union[str, Path], content: bytes) -> Path:
    """
    임시 파일에 쓴 뒤 교체하는 방식으로 파일 쓰기

    같은 디렉토리의 임시 파일을 os.replace로 옮기므로 중간에 실패해도
    기존 파일이 반쯤 쓰인 상태로 남지 않습니다.

    Args:
        path: 대상 파일 경로
        content: 파일 내용

    Returns:
        Path: 대상 파일 경로 객체
    """
    path = Path(path)
    ensure_directory(path.parent)
    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.tmp")

    try:
        with open(tmp_path, 'wb') as f:
            f.write(content)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()

    return path


def format_duration(seconds: float) -> str:
    """
    지속 시간을 사람이 읽기 쉬운 형태로 변환

    Args:
        seconds: 초 단위 시간

    Returns:
        str: 형식화된 시간 문자열
    """
    if seconds < 60:
        return f"{seconds:.1f}초"
    elif seconds < 3600:
        minutes = seconds // 60
        seconds = seconds % 60
        return f"{int(minutes)}분 {seconds:.1f}초"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        seconds = seconds % 60
        return f"{int(hours)}시간 {int(minutes)}분 {seconds:.1f}초"

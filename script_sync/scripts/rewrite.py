"""
스크립트 본문 재작성 모듈

기본 카테고리(ct) 스크립트가 실행 시점에 공용 부트스트랩 파일을 네트워크에서
다시 받지 않도록, 원격 다운로드 호출을 로컬 형제 헬퍼 로딩으로 바꿉니다.
"""

import re

DEFAULT_HELPER_PATH = "../core/build.func"

# source <(curl -fsSL https://raw.githubusercontent.com/<owner>/<repo>/<branch>/misc/build.func)
BOOTSTRAP_PATTERN = re.compile(
    r"source <\(curl -fsSL https://raw\.githubusercontent\.com/"
    r"[^/\s)]+/[^/\s)]+/[^/\s)]+/misc/build\.func\)"
)


def local_bootstrap_line(helper_path: str = DEFAULT_HELPER_PATH) -> str:
    """로컬 헬퍼를 불러오는 대체 구문"""
    return f'SCRIPT_DIR="$(dirname "$0")" \nsource "$SCRIPT_DIR/{helper_path}"'


def rewrite_bootstrap(content: str, helper_path: str = DEFAULT_HELPER_PATH) -> str:
    """
    원격 부트스트랩 호출을 로컬 헬퍼 로딩으로 재작성

    다운로드 시점과 비교 시점에 같은 함수를 사용해야 로컬/원격 비교에서
    허위 차이가 생기지 않습니다.

    Args:
        content: 스크립트 본문
        helper_path: 스크립트 위치 기준 헬퍼 상대 경로

    Returns:
        재작성된 본문 (패턴이 없으면 원문 그대로)
    """
    replacement = local_bootstrap_line(helper_path)
    return BOOTSTRAP_PATTERN.sub(lambda _match: replacement, content)

"""
텍스트 diff 모듈

로컬 스크립트와 원격 스크립트의 줄 단위 차이를 사람이 읽을 수 있는 형태로
생성합니다.

알고리즘은 LCS/Myers 같은 최소 편집 거리 diff가 아니라, 불일치 지점에서 고정된
탐색 창 안에서만 재동기화 지점을 찾는 탐욕적 휴리스틱입니다. 결과가 최소
편집이라는 보장은 없지만 거의 선형 시간에 동작합니다.

출력 형식 (줄 번호는 각 측 기준 1부터):
    "+N: ..."  원격에만 있는 줄 (추가)
    "-N: ..."  로컬에만 있는 줄 (삭제)
    " N: ..."  양쪽에 같은 줄 (문맥, 로컬 줄 번호)
"""

DEFAULT_LOOKAHEAD = 10


def _added(line_no: int, line: str) -> str:
    return f"+{line_no}: {line}"


def _removed(line_no: int, line: str) -> str:
    return f"-{line_no}: {line}"


def _context(line_no: int, line: str) -> str:
    return f" {line_no}: {line}"


def diff_lines(local_text: str, remote_text: str, lookahead: int = DEFAULT_LOOKAHEAD) -> list[str]:
    """
    줄 단위 diff 목록 생성

    Args:
        local_text: 로컬 내용
        remote_text: 원격 내용
        lookahead: 불일치 시 앞으로 탐색할 줄 수

    Returns:
        주석이 붙은 diff 줄 목록 (개행 문자 없음)
    """
    local_lines = local_text.split("\n")
    remote_lines = remote_text.split("\n")
    n_local = len(local_lines)
    n_remote = len(remote_lines)

    output: list[str] = []
    i = 0
    j = 0

    while i < n_local or j < n_remote:
        if i >= n_local:
            output.append(_added(j + 1, remote_lines[j]))
            j += 1
            continue

        if j >= n_remote:
            output.append(_removed(i + 1, local_lines[i]))
            i += 1
            continue

        local_line = local_lines[i]
        remote_line = remote_lines[j]

        if local_line == remote_line:
            output.append(_context(i + 1, local_line))
            i += 1
            j += 1
            continue

        # 원격 쪽 탐색 창에서 현재 로컬 줄 찾기 -> 사이의 원격 줄은 추가된 것
        window_end = min(j + 1 + lookahead, n_remote)
        match = next((k for k in range(j + 1, window_end) if remote_lines[k] == local_line), None)
        if match is not None:
            for k in range(j, match):
                output.append(_added(k + 1, remote_lines[k]))
            output.append(_context(i + 1, local_line))
            i += 1
            j = match + 1
            continue

        # 로컬 쪽 탐색 창에서 현재 원격 줄 찾기 -> 사이의 로컬 줄은 삭제된 것
        window_end = min(i + 1 + lookahead, n_local)
        match = next((k for k in range(i + 1, window_end) if local_lines[k] == remote_line), None)
        if match is not None:
            for k in range(i, match):
                output.append(_removed(k + 1, local_lines[k]))
            output.append(_context(match + 1, remote_line))
            i = match + 1
            j += 1
            continue

        output.append(_removed(i + 1, local_line))
        output.append(_added(j + 1, remote_line))
        i += 1
        j += 1

    return output


def generate_diff(local_text: str, remote_text: str, lookahead: int = DEFAULT_LOOKAHEAD) -> str:
    """
    줄 단위 diff 텍스트 생성

    Args:
        local_text: 로컬 내용
        remote_text: 원격 내용
        lookahead: 불일치 시 앞으로 탐색할 줄 수

    Returns:
        각 줄이 개행으로 끝나는 diff 텍스트
    """
    return "".join(f"{line}\n" for line in diff_lines(local_text, remote_text, lookahead))

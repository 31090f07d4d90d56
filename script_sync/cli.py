"""
명령줄 인터페이스 모듈

사용법:
    python -m script_sync sync [--source URL]
    python -m script_sync diff SLUG PATH
    python -m script_sync compare SLUG
    python -m script_sync load SLUG
    python -m script_sync remove-source URL
    python -m script_sync serve
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from .config.settings import get_settings
from .exceptions import ScriptSyncException
from .scripts.downloader import ScriptDownloader
from .scripts.registry import validate_repository_url
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="script_sync",
        description="다중 저장소 스크립트 메타데이터 동기화 및 비교 도구"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sync = sub.add_parser("sync", help="활성화된 모든 저장소 (또는 하나) 동기화")
    sync.add_argument("--source", help="동기화할 저장소 URL (생략하면 전체)")

    diff = sub.add_parser("diff", help="로컬/원격 파일 diff 출력")
    diff.add_argument("slug")
    diff.add_argument("path", help="파일 경로 (예: ct/redis.sh)")

    compare = sub.add_parser("compare", help="로컬 에셋과 원격 내용 비교")
    compare.add_argument("slug")

    load = sub.add_parser("load", help="스크립트 에셋 다운로드")
    load.add_argument("slug")

    remove = sub.add_parser("remove-source", help="삭제된 저장소에서 온 메타데이터 정리")
    remove.add_argument("url")

    sub.add_parser("serve", help="REST API 서버 실행")
    return parser


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


async def _run(args: argparse.Namespace, downloader: ScriptDownloader) -> int:
    """서브커맨드 실행 (종료 코드 반환)"""
    if args.command == "sync":
        if args.source:
            report = await downloader.sync_one(validate_repository_url(args.source))
        else:
            report = await downloader.sync_all()
        _print_json(report.model_dump(by_alias=True))
        return 0 if report.success else 1

    if args.command == "diff":
        result = await downloader.get_script_diff(args.slug, args.path)
        if result.diff is None:
            print(result.error or "diff를 생성할 수 없습니다", file=sys.stderr)
            return 1
        sys.stdout.write(result.diff)
        return 0

    if args.command == "compare":
        result = await downloader.compare_script(args.slug)
        _print_json(result.model_dump())
        return 1 if result.error and not result.differences else 0

    if args.command == "load":
        result = await downloader.load_script(args.slug)
        _print_json(result.model_dump())
        return 0 if result.success else 1

    if args.command == "remove-source":
        removed = downloader.remove_source(validate_repository_url(args.url))
        _print_json({"identifier": args.url, "removed_files": removed, "count": len(removed)})
        return 0

    raise ValueError(f"알 수 없는 명령: {args.command}")


async def _run_with_downloader(args: argparse.Namespace, settings) -> int:
    async with ScriptDownloader(settings) as downloader:
        return await _run(args, downloader)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI 메인 함수"""
    args = _build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ScriptSyncException as e:
        print(e.message, file=sys.stderr)
        return 2

    setup_logging(settings)

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "script_sync.api.main:create_app",
            factory=True,
            host=settings.api_host,
            port=settings.api_port,
            reload=settings.api_reload,
            log_level="info"
        )
        return 0

    try:
        return asyncio.run(_run_with_downloader(args, settings))
    except ScriptSyncException as e:
        logger.error(f"명령 실행 실패: {e.message}")
        print(e.message, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("사용자 요청으로 중단되었습니다")
        return 130


if __name__ == "__main__":
    sys.exit(main())

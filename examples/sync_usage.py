#!/usr/bin/env python3
"""
스크립트 동기화 시스템 사용 예제

여러 GitHub 저장소의 메타데이터를 로컬로 미러링하고, 에셋을 받아 원격
내용과 비교하는 방법을 보여줍니다.
"""

import asyncio
import tempfile

from script_sync.config.settings import Settings
from script_sync.models.base import SourceDescriptor
from script_sync.scripts import ScriptDownloader, diff_script


def example_settings() -> Settings:
    """임시 디렉토리를 쓰는 예제 설정"""
    return Settings(
        scripts_dir=tempfile.mkdtemp(),
        repositories=[
            SourceDescriptor(identifier="https://github.com/community-scripts/ProxmoxVE", priority=1),
            SourceDescriptor(identifier="https://github.com/example/my-scripts", priority=2),
        ],
    )


async def sync_example(settings: Settings):
    """전체 동기화 예제"""
    print("=== 전체 동기화 ===")

    async with ScriptDownloader(settings) as downloader:
        report = await downloader.sync_all()
        print(f"결과: {report.message}")
        print(f"동기화된 파일 수: {report.count}")
        for source, error in report.errors.items():
            print(f"⚠️  {source}: {error}")

        # 다시 실행하면 바뀐 것이 없으므로 0개
        again = await downloader.sync_all()
        print(f"재실행 시 동기화된 파일 수: {again.count}")

        print("\n로컬 스크립트 (처음 5개)")
        for card in downloader.list_script_cards()[:5]:
            print(f"- {card.slug}: {card.name} ({card.source_origin})")


async def asset_example(settings: Settings, slug: str = "redis"):
    """에셋 다운로드 및 비교 예제"""
    print(f"\n=== 에셋 다운로드 및 비교: {slug} ===")

    async with ScriptDownloader(settings) as downloader:
        loaded = await downloader.load_script(slug)
        print(f"다운로드: {loaded.message}")
        for path in loaded.files:
            print(f"- {path}")

        status = await downloader.check_script_exists(slug)
        print(f"기본 스크립트 존재: {status.primary_exists}, 설치 스크립트 존재: {status.install_exists}")

        comparison = await downloader.compare_script(slug)
        if comparison.has_differences:
            print(f"원격과 다른 파일: {comparison.differences}")
        else:
            print("원격과 같은 내용입니다")


async def diff_example(settings: Settings, slug: str = "redis"):
    """편의 함수로 diff 출력"""
    print(f"\n=== diff: {slug} ===")

    result = await diff_script(slug, f"ct/{slug}.sh", settings)
    if result.diff is None:
        print(f"diff를 만들 수 없습니다: {result.error}")
    else:
        print(result.diff)


async def main():
    settings = example_settings()

    try:
        await sync_example(settings)
        await asset_example(settings)
        await diff_example(settings)
    except Exception as e:
        print(f"예제 실행 중 오류 발생: {e}")


if __name__ == "__main__":
    asyncio.run(main())

"""
스크립트 동기화 시스템

여러 GitHub 저장소의 스크립트 메타데이터와 에셋을 로컬 저장소로 미러링하고,
로컬에 내려받은 에셋과 원격 내용을 비교합니다.
"""

__version__ = "1.0.0"

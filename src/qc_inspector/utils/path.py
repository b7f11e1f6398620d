import os
from pathlib import Path


def get_project_root() -> Path:
    """프로젝트 루트 경로 반환.

    Notes:
        - 필요 시 환경변수 ``QC_INSPECTOR_ROOT`` 로 강제 지정하세요.
    """
    env_root = os.environ.get("QC_INSPECTOR_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    # src/qc_inspector/utils/path.py -> utils -> qc_inspector -> src -> project_root
    return Path(__file__).resolve().parents[3]


def get_logs_dir() -> Path:
    """로그 디렉토리 경로 반환 (없으면 생성)."""
    logs_dir = get_project_root() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir

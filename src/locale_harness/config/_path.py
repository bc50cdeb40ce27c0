import os
from pathlib import Path


def _find_project_root() -> Path:
    """项目根目录: PROJECT_ROOT 环境变量 > 源码树根目录 > 当前工作目录"""
    if os.environ.get("PROJECT_ROOT"):
        return Path(os.environ["PROJECT_ROOT"]).resolve()
    # src/locale_harness/config/_path.py -> 根目录
    source_root = Path(__file__).resolve().parents[3]
    if (source_root / "environments").is_dir():
        return source_root
    return Path.cwd().resolve()


PROJECT_ROOT = _find_project_root()

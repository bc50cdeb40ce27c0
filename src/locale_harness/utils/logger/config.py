"""日志配置（环境变量驱动）

LOG_DIR / LOG_LEVEL / LOG_FILE / ENV / LOG_BACKUP_COUNT / LOG_MAX_BYTES / LOG_QUIET / LOG_TO_FILE
LOG_PER_LANGUAGE=true 时主日志文件名带上 TEST_LANG（test_run.fr.log），
多个语言并行运行时互不覆盖。
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from ...config._path import PROJECT_ROOT


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'y', 'on')
    return bool(value)


# 环境变量 -> (LogConfig 属性, 转换函数)
_ENV_FIELDS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    'LOG_DIR': ('LOG_DIR', Path),
    'LOG_LEVEL': ('LOG_LEVEL', lambda v: v.strip().upper()),
    'LOG_FILE': ('MAIN_LOG_FILE', str),
    'ENV': ('ENV', str),
    'LOG_BACKUP_COUNT': ('BACKUP_COUNT', int),
    'LOG_MAX_BYTES': ('MAX_BYTES', int),
    'LOG_QUIET': ('QUIET', parse_bool),
    'LOG_TO_FILE': ('LOG_TO_FILE', parse_bool),
    'LOG_PER_LANGUAGE': ('PER_LANGUAGE', parse_bool),
}


class LogConfig:
    """日志配置（类属性，进程内共享）"""
    LOG_DIR: Path = PROJECT_ROOT / 'logs'
    LOG_LEVEL: str = 'INFO'
    MAIN_LOG_FILE: str = 'test_run.log'
    BACKUP_COUNT: int = 7
    MAX_BYTES: int = 10 * 1024 * 1024  # 10MB
    ENV: str = 'dev'
    QUIET: bool = False
    LOG_TO_FILE: bool = True
    PER_LANGUAGE: bool = False

    VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
    _DEFAULTS: Dict[str, Any] = {}

    @classmethod
    def initialize(cls, environ: Optional[Dict[str, str]] = None):
        """恢复默认值后按环境变量覆盖"""
        if not cls._DEFAULTS:
            cls._DEFAULTS = {attr: getattr(cls, attr) for attr, _ in _ENV_FIELDS.values()}
        for attr, value in cls._DEFAULTS.items():
            setattr(cls, attr, value)

        source = os.environ if environ is None else environ
        for env_name, (attr, cast) in _ENV_FIELDS.items():
            raw = source.get(env_name)
            if raw in (None, ''):
                continue
            try:
                setattr(cls, attr, cast(raw))
            except ValueError:
                cls._warn(f"Invalid {env_name}={raw!r}, keeping {getattr(cls, attr)!r}")
        cls._validate_config()

    @classmethod
    def _validate_config(cls):
        if cls.LOG_LEVEL not in cls.VALID_LOG_LEVELS:
            cls._warn(f"Invalid log level: {cls.LOG_LEVEL}, using INFO instead")
            cls.LOG_LEVEL = 'INFO'
        if cls.BACKUP_COUNT < 1:
            cls._warn(f"Invalid backup count: {cls.BACKUP_COUNT}, using 7 instead")
            cls.BACKUP_COUNT = 7
        if cls.MAX_BYTES < 1024:
            cls._warn(f"Invalid max bytes: {cls.MAX_BYTES}, using 10MB instead")
            cls.MAX_BYTES = 10 * 1024 * 1024

    @classmethod
    def _warn(cls, message: str):
        # 日志系统自身尚未就绪，只能写 stderr
        if not cls.QUIET:
            print(f"⚠️  {message}", file=sys.stderr)

    @classmethod
    def main_log_file(cls, language: Optional[str] = None) -> str:
        """主日志文件名；按语言拆分时插入语言代码"""
        if not cls.PER_LANGUAGE:
            return cls.MAIN_LOG_FILE
        language = language or os.environ.get('TEST_LANG') or 'en'
        path = Path(cls.MAIN_LOG_FILE)
        return f"{path.stem}.{language.strip().lower()}{path.suffix}"

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        return getattr(cls, key.upper(), default)


LogConfig.initialize()

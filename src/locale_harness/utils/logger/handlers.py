"""日志处理器工厂

console  -> stdout
timed    -> 按天轮转（主日志）
rotating -> 按大小轮转（错误日志）
轮转出的旧文件统一放进 <LOG_DIR>/history/。
"""

import logging
import sys
import threading
from datetime import datetime
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Callable, Dict, List

from .config import LogConfig
from .formatters import SecurityFormatter


def _log_dir() -> Path:
    log_dir = Path(LogConfig.LOG_DIR).resolve()
    try:
        (log_dir / "history").mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"❌ Log directory initialization failed: {e} (path: {log_dir})") from e
    return log_dir


def _archive_to_history(history_dir: Path, date_suffix: bool) -> Callable[[str], str]:
    def rotation_filename(default_name: str) -> str:
        name = Path(default_name).name
        if date_suffix:
            name = f"{name}.{datetime.now():%Y%m%d}"
        return str(history_dir / name)
    return rotation_filename


def _console(filename: str, **kwargs) -> logging.Handler:
    return logging.StreamHandler(sys.stdout)


def _timed(filename: str, **kwargs) -> logging.Handler:
    log_dir = _log_dir()
    handler = TimedRotatingFileHandler(
        log_dir / filename,
        when=kwargs.get("when", "midnight"),
        backupCount=kwargs.get("backupCount", LogConfig.BACKUP_COUNT),
        encoding="utf-8",
    )
    handler.rotation_filename = _archive_to_history(log_dir / "history", date_suffix=False)
    return handler


def _rotating(filename: str, **kwargs) -> logging.Handler:
    log_dir = _log_dir()
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=kwargs.get("maxBytes", LogConfig.MAX_BYTES),
        backupCount=kwargs.get("backupCount", 5),
        encoding="utf-8",
    )
    handler.rotation_filename = _archive_to_history(log_dir / "history", date_suffix=True)
    return handler


class HandlerFactory:
    """创建并登记日志处理器，进程退出时统一关闭"""

    _builders: Dict[str, Callable[..., logging.Handler]] = {
        "console": _console,
        "timed": _timed,
        "rotating": _rotating,
    }
    _handlers: List[logging.Handler] = []
    _lock = threading.RLock()

    @classmethod
    def create_handler(cls, handler_type: str, filename: str, level: int, **kwargs) -> logging.Handler:
        try:
            builder = cls._builders[handler_type]
        except KeyError:
            raise ValueError(f"Unknown handler type: {handler_type}") from None

        handler = builder(filename, **kwargs)
        handler.setLevel(level)
        handler.setFormatter(SecurityFormatter(SecurityFormatter.STANDARD_FORMAT, SecurityFormatter.DATE_FORMAT))
        with cls._lock:
            cls._handlers.append(handler)
        return handler

    @classmethod
    def cleanup(cls) -> None:
        """关闭所有登记的处理器；单个处理器出错（如 stdout 已被关闭）不影响其余处理器"""
        with cls._lock:
            while cls._handlers:
                handler = cls._handlers.pop()
                try:
                    handler.acquire()
                    try:
                        # pytest 等会在退出前关闭它替换过的 stdout
                        if not getattr(getattr(handler, "stream", None), "closed", False):
                            handler.flush()
                        handler.close()
                    finally:
                        handler.release()
                except (OSError, ValueError) as e:
                    sys.stderr.write(f"⚠️ Log handler cleanup failed: {handler!r}: {e}\n")

    @classmethod
    def get_handler_count(cls) -> int:
        with cls._lock:
            return len(cls._handlers)


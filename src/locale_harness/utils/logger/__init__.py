"""测试运行日志系统

标准格式:
    2026-02-15 00:30:45 INFO     [accessor.py:get_locale:42] Catalog resolved
"""

import atexit

from .config import LogConfig
from .formatters import SecurityFormatter
from .handlers import HandlerFactory
from .lazy_logger import LazyLogger
from .components import log_step, log_duration

__all__ = [
    "logger", "log_step", "log_duration",
    "LazyLogger", "LogConfig", "HandlerFactory", "SecurityFormatter", "cleanup"
]


def cleanup():
    """全局清理函数"""
    LazyLogger.cleanup()
    HandlerFactory.cleanup()


atexit.register(cleanup)

logger = LazyLogger.get("automation")

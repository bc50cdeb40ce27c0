"""页面操作步骤与耗时记录"""

import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Callable, Optional

import allure

from .lazy_logger import LazyLogger

PERF_LOGGER = "performance"


def log_step(step_name: str, logger_param: Optional[logging.Logger] = None):
    """
    页面对象方法装饰器：写日志并在 Allure 报告中生成同名步骤

    异常记录后原样抛出。
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            log = logger_param or logging.getLogger("automation")
            log.info("▶️ Step: %s", step_name)
            with allure.step(step_name):
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    log.error("❌ Failed: %s | %s", step_name, e)
                    raise
            log.info("✅ Completed: %s", step_name)
            return result
        return wrapper
    return decorator


@contextmanager
def log_duration(step_name: str, logger_param: Optional[logging.Logger] = None, threshold_ms: float = 1000.0):
    """记录代码块耗时，超过 threshold_ms 标记为 SLOW

    默认写入 performance 日志器（仅文件 performance.log），首次计时时才创建。
    """
    log = logger_param or LazyLogger.get(PERF_LOGGER, log_level="DEBUG", log_to_console=False,
                                         separate_log_file="performance.log")
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.info("%s took %.1fms%s", step_name, elapsed_ms, " ⚠️ SLOW" if elapsed_ms >= threshold_ms else "")

"""按名称缓存的日志实例"""

import logging
import os
import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from .config import LogConfig
from .handlers import HandlerFactory

MAIN_LOGGER = "automation"

_instances: Dict[str, logging.Logger] = {}
_lock = threading.Lock()


class LazyLogger:
    """首次 get() 时配置处理器，之后返回同一个实例"""

    @classmethod
    def get(
        cls,
        name: str,
        log_level: Optional[str] = None,
        log_to_console: bool = True,
        log_to_file: Optional[bool] = None,
        separate_log_file: Union[bool, str, None] = None,
        propagate: bool = False,
    ) -> logging.Logger:
        with _lock:
            if name in _instances:
                return _instances[name]

            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
                handler.close()

            level = logging.getLevelName((log_level or LogConfig.LOG_LEVEL).upper())
            logger.setLevel(level if isinstance(level, int) else logging.INFO)
            logger.propagate = propagate

            if log_to_console:
                logger.addHandler(HandlerFactory.create_handler("console", "", logging.DEBUG))

            if LogConfig.LOG_TO_FILE if log_to_file is None else log_to_file:
                if name == MAIN_LOGGER:
                    logger.addHandler(HandlerFactory.create_handler("timed", LogConfig.main_log_file(), logging.DEBUG))
                    # 错误日志（含堆栈）
                    logger.addHandler(HandlerFactory.create_handler(
                        "rotating", f"error_{datetime.now():%Y%m%d}.log", logging.ERROR
                    ))
                elif separate_log_file:
                    filename = f"{name}.log" if separate_log_file is True else separate_log_file
                    logger.addHandler(HandlerFactory.create_handler("timed", filename, logging.DEBUG))

            if name == MAIN_LOGGER and not LogConfig.QUIET:
                logger.info("=" * 70)
                logger.info(f"✅ Locale Harness | Env: {LogConfig.ENV} | TEST_LANG: {os.environ.get('TEST_LANG') or '-'} "
                            f"| Level: {logging.getLevelName(logger.level)}")
                logger.info(f"⏰ UTC: {datetime.now(timezone.utc).isoformat()}")
                logger.info("=" * 70)

            _instances[name] = logger
            return logger

    @classmethod
    def cleanup(cls):
        with _lock:
            for logger in _instances.values():
                for handler in logger.handlers[:]:
                    logger.removeHandler(handler)
            _instances.clear()

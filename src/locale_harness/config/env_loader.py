"""
环境变量 -> 配置字典

.env 只补充系统环境中不存在的变量。TEST_LANG 不在这里映射，
它不进入缓存的 AppConfig。
"""
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from dotenv import load_dotenv

from ._path import PROJECT_ROOT


def _as_bool(value: str) -> bool:
    return value.strip().lower() == "true"


# 环境变量名 -> (配置路径, 转换函数)
ENV_MAPPING: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "ENV": ("env", str.lower),
    "BASE_URL": ("base_url", str),
    "GOOGLE_URL": ("google_url", str),
    "BROWSER_HEADLESS": ("browser.headless", _as_bool),
    "BROWSER_TYPE": ("browser.type", str.lower),
    "VIEWPORT_WIDTH": ("browser.viewport.width", int),
    "VIEWPORT_HEIGHT": ("browser.viewport.height", int),
    "PAGE_LOAD_TIMEOUT": ("timeouts.page_load", int),
    "ELEMENT_WAIT_TIMEOUT": ("timeouts.element_wait", int),
    "ASSERTION_TIMEOUT": ("timeouts.assertion", int),
    "SCREENSHOT_ON_FAILURE": ("screenshot_on_failure", _as_bool),
}


class EnvLoader:
    """从系统环境（及可选的 .env 文件）读取配置"""

    def __init__(self, env_file: Optional[Path] = None):
        self.env_file = env_file
        self._dotenv_loaded = False

    def load(self) -> Dict[str, Any]:
        if not self._dotenv_loaded:
            env_path = Path(self.env_file or os.getenv("ENV_FILE") or PROJECT_ROOT / ".env")
            if env_path.is_file():
                load_dotenv(env_path, override=False)
            self._dotenv_loaded = True
        return self.to_config(os.environ)

    @staticmethod
    def to_config(environ) -> Dict[str, Any]:
        """只包含已设置（非空）的变量"""
        config: Dict[str, Any] = {}
        for name, (path, convert) in ENV_MAPPING.items():
            raw = environ.get(name)
            if not raw:
                continue
            *parents, leaf = path.split(".")
            node = config
            for part in parents:
                node = node.setdefault(part, {})
            try:
                node[leaf] = convert(raw)
            except ValueError as e:
                raise ValueError(f"环境变量 {name}={raw!r} 无法转换: {e}") from e
        return config

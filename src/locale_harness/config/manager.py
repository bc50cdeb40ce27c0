"""
运行配置

合并顺序（后者覆盖前者）::

    environments/base.yaml -> environments/<ENV>.yaml -> 环境变量 / .env -> apply_overrides()

语言不在这里：TEST_LANG 每次由 locale_harness.i18n.resolver 读取。
日志不在这里：LOG_* 由 locale_harness.utils.logger.config.LogConfig 在导入时读取。
"""
import os
from functools import reduce
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from ._path import PROJECT_ROOT
from .env_loader import EnvLoader
from .yaml_loader import YamlLoader

_MISSING = object()


class _Section(BaseModel):
    model_config = ConfigDict(protected_namespaces=(), extra="ignore")


class BrowserConfig(_Section):
    headless: bool = True
    type: Literal["chromium", "firefox", "webkit"] = "chromium"
    viewport: Dict[str, int] = {"width": 1280, "height": 720}
    slow_mo: int = 0


class TimeoutsConfig(_Section):
    """毫秒"""
    page_load: PositiveInt = 30000
    element_wait: PositiveInt = 10000
    assertion: PositiveInt = 5000


class AppConfig(_Section):
    """应用级配置"""

    env: Literal["dev", "ci", "staging"] = "dev"
    # RHDH 实例地址（设置页场景）
    base_url: str = "http://localhost:3000"
    # Google / Gmail 场景
    google_url: str = "https://www.google.com/"

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    screenshot_on_failure: bool = True
    screenshot_dir: Path = PROJECT_ROOT / "reports/screenshots"

    project_root: Path = PROJECT_ROOT


class ConfigManager:
    """延迟加载的配置入口，首次访问属性时合并全部来源"""

    def __init__(self, yaml_loader: Optional[YamlLoader] = None, env_loader: Optional[EnvLoader] = None):
        self._config: Optional[AppConfig] = None
        self._yaml_loader = yaml_loader or YamlLoader()
        self._env_loader = env_loader or EnvLoader()
        self._overrides: Dict[str, Any] = {}

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def _load_config(self) -> AppConfig:
        from_env = self._env_loader.load()
        env = self._overrides.get("env") or from_env.get("env") or os.getenv("ENV", "dev")

        layers = [self._yaml_loader.load_environment(env=env), from_env, self._overrides]
        merged = reduce(YamlLoader.deep_merge, layers, {})
        try:
            return AppConfig(**merged)
        except ValidationError as e:
            raise RuntimeError(self._format_validation_error(e)) from None

    def initialize(self):
        """立即加载（通常由首次属性访问触发）"""
        _ = self.config

    def reload(self):
        """丢弃已加载配置，下次访问时重新合并"""
        self._config = None
        self._yaml_loader.clear_cache()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        value = getattr(self.config, name, _MISSING)
        if value is _MISSING:
            raise AttributeError(
                f"配置中不存在属性: {name}\n可用属性: {', '.join(sorted(AppConfig.model_fields))}"
            )
        return value

    def get(self, path: str, default: Any = None) -> Any:
        """
        按点分路径取值
        示例: settings.get("timeouts.element_wait", 10000)
        """
        current: Any = self.config.model_dump()
        for key in path.split("."):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    def apply_overrides(self, overrides_str: str):
        """
        命令行覆盖，格式 "browser.headless=false,timeouts.assertion=2500"
        值按 YAML 标量解析（true/false、整数、浮点数，其余为字符串）。
        多次调用累积生效，同一路径以最后一次为准。
        """
        if not overrides_str:
            return

        overrides: Dict[str, Any] = {}
        for pair in overrides_str.split(","):
            key, sep, raw = pair.partition("=")
            if not sep:
                continue
            *parents, leaf = [part.strip() for part in key.split(".")]
            target = reduce(lambda node, part: node.setdefault(part, {}), parents, overrides)
            target[leaf] = self._parse_value(raw.strip())

        self._overrides = YamlLoader.deep_merge(self._overrides, overrides)
        self._config = None

    @staticmethod
    def _parse_value(raw: str) -> Any:
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            return raw
        return value if isinstance(value, (bool, int, float, str)) else raw

    def to_yaml(self) -> str:
        """当前生效配置的 YAML 快照（附加到报告便于复现）"""
        return yaml.safe_dump(self.config.model_dump(mode="json"), sort_keys=False, allow_unicode=True)

    @staticmethod
    def _format_validation_error(error: ValidationError) -> str:
        lines = ["配置验证失败:"]
        for err in error.errors():
            loc = ".".join(str(part) for part in err["loc"])
            lines.append(f"  配置项 '{loc}': {err['msg']} (值: {err.get('input')!r})")
        return "\n".join(lines)

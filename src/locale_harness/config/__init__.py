from .manager import ConfigManager, AppConfig
from .env_loader import EnvLoader
from .yaml_loader import YamlLoader
from ._path import PROJECT_ROOT

# 全局唯一配置实例（首次访问属性时加载）
settings = ConfigManager()

__all__ = [
    "settings",
    "ConfigManager",
    "AppConfig",
    "EnvLoader",
    "YamlLoader",
    "PROJECT_ROOT"
]

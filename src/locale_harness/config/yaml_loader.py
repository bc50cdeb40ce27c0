import copy
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from ._path import PROJECT_ROOT

BASE_FILE = "base.yaml"


class YamlLoader:
    """environments/ 下的 YAML 配置加载器

    base.yaml 必须存在；<env>.yaml 可选，深度合并到 base 之上。
    结果按文件修改时间缓存，文件变化后自动重新读取。
    """

    def __init__(self, config_dir: Union[str, Path] = PROJECT_ROOT / "environments"):
        self.config_dir = Path(config_dir)
        self._cache: Dict[str, Tuple[Tuple[float, float], Dict[str, Any]]] = {}

    def load_environment(self, env: str = "dev") -> Dict[str, Any]:
        signature = (self._mtime(BASE_FILE), self._mtime(f"{env}.yaml"))
        cached = self._cache.get(env)
        if cached is None or cached[0] != signature:
            merged = self.deep_merge(self._read(BASE_FILE, required=True), self._read(f"{env}.yaml"))
            cached = self._cache[env] = (signature, merged)
        return copy.deepcopy(cached[1])

    def _mtime(self, filename: str) -> float:
        path = self.config_dir / filename
        return path.stat().st_mtime if path.exists() else 0.0

    def _read(self, filename: str, required: bool = False) -> Dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            if required:
                raise FileNotFoundError(f"基础配置文件不存在: {path}")
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"YAML解析错误 ({path}): {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"YAML根节点必须是字典 ({path}): {type(data).__name__}")
        return data

    @classmethod
    def deep_merge(cls, base: Dict, override: Dict) -> Dict:
        """递归合并，override 优先；两边都是字典时逐层合并"""
        result = dict(base)
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = cls.deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def clear_cache(self):
        self._cache.clear()

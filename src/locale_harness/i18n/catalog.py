"""
翻译目录（Catalog）与目录注册表（CatalogRegistry）

- Catalog: 单一语言的 key -> 本地化文本映射，构建后不可变
- CatalogRegistry: Language -> Catalog 映射，进程启动时构建一次，之后只读

查找缺失的 key 返回 None（latent defect），不会抛异常；
缺失 key 是否算失败由断言层决定。
"""
import json
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Union

import yaml

from ..utils.logger import logger
from .languages import DEFAULT_LANGUAGE, Language

LOCALES_DIR = Path(__file__).parent / "locales"

CATALOG_SUFFIXES = (".yaml", ".yml", ".json")


class CatalogError(Exception):
    """Base catalog-related error."""


class CatalogLoadError(CatalogError):
    """Raised when a catalog file cannot be parsed into a flat key/value mapping."""


class CatalogRegistryError(CatalogError):
    """Raised when the registry composition is invalid (duplicate or missing default language)."""


class Catalog(Mapping):
    """单一语言的不可变翻译目录"""

    __slots__ = ("_language", "_entries")

    def __init__(self, language: Language, entries: Mapping[str, str]):
        object.__setattr__(self, "_language", Language(language))
        object.__setattr__(self, "_entries", MappingProxyType(
            {str(key): str(value) for key, value in entries.items()}
        ))

    @property
    def language(self) -> Language:
        return self._language

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """查找 key；缺失时返回 default（默认 None），从不抛异常"""
        return self._entries.get(key, default)

    def __getattr__(self, name: str) -> str:
        # catalog.rhdhLanguage 形式的访问
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._entries[name]
        except KeyError:
            raise AttributeError(f"Catalog '{self._language.value}' has no key '{name}'") from None

    def __setattr__(self, name, value):
        raise AttributeError("Catalog is immutable")

    def __delattr__(self, name):
        raise AttributeError("Catalog is immutable")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Catalog):
            return NotImplemented
        return self._language == other._language and dict(self._entries) == dict(other._entries)

    def __hash__(self) -> int:
        return hash((self._language, frozenset(self._entries.items())))

    def __repr__(self) -> str:
        return f"Catalog(language={self._language.value!r}, keys={len(self._entries)})"

    def missing_keys(self, reference: "Catalog") -> List[str]:
        """返回 reference 中存在但本目录缺失的 key（已排序）"""
        return sorted(set(reference) - set(self._entries))

    @classmethod
    def from_file(cls, language: Language, file_path: Union[str, Path]) -> "Catalog":
        """从 YAML/JSON 文件加载单一语言目录

        文件内容必须是扁平的 key: value 映射，值统一转换为字符串。

        Raises:
            CatalogLoadError: 文件无法解析或结构不是映射
        """
        file_path = Path(file_path)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if file_path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise CatalogLoadError(f"无法加载翻译目录 {file_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise CatalogLoadError(
                f"翻译目录根节点必须是映射: {file_path} (当前类型: {type(data).__name__})"
            )
        nested = [key for key, value in data.items() if isinstance(value, (dict, list))]
        if nested:
            raise CatalogLoadError(f"翻译目录必须是扁平映射: {file_path} (嵌套 key: {nested})")

        return cls(language, data)


class CatalogRegistry(Mapping):
    """Language -> Catalog 的只读注册表"""

    __slots__ = ("_catalogs", "_default")

    def __init__(self, catalogs: Iterable[Catalog], default: Language = DEFAULT_LANGUAGE):
        registered: Dict[Language, Catalog] = {}
        for catalog in catalogs:
            if catalog.language in registered:
                raise CatalogRegistryError(f"语言重复注册: {catalog.language.value}")
            registered[catalog.language] = catalog

        if default not in registered:
            raise CatalogRegistryError(f"缺少默认语言目录: {default.value}")

        self._catalogs = MappingProxyType(registered)
        self._default = default

    @property
    def default_language(self) -> Language:
        return self._default

    @property
    def default(self) -> Catalog:
        return self._catalogs[self._default]

    def __getitem__(self, language: Union[Language, str]) -> Catalog:
        parsed = Language.parse(language)
        if parsed is None or parsed not in self._catalogs:
            raise KeyError(language)
        return self._catalogs[parsed]

    def __contains__(self, language) -> bool:
        parsed = Language.parse(language)
        return parsed is not None and parsed in self._catalogs

    def __iter__(self) -> Iterator[Language]:
        return iter(self._catalogs)

    def __len__(self) -> int:
        return len(self._catalogs)

    def __repr__(self) -> str:
        return f"CatalogRegistry(languages={[lang.value for lang in self._catalogs]}, default={self._default.value!r})"

    def integrity_report(self) -> Dict[Language, List[str]]:
        """返回每种语言相对默认目录缺失的 key；完整的语言不出现在结果中"""
        report = {}
        for language, catalog in self._catalogs.items():
            missing = catalog.missing_keys(self.default)
            if missing:
                report[language] = missing
        return report

    @classmethod
    def from_directory(cls, dir_path: Union[str, Path], default: Language = DEFAULT_LANGUAGE) -> "CatalogRegistry":
        """从目录加载全部 <code>.yaml / <code>.yml / <code>.json 目录文件

        文件名（不含后缀）必须是已注册的语言代码，其他文件跳过并记录警告。
        """
        dir_path = Path(dir_path)
        if not dir_path.is_dir():
            raise CatalogLoadError(f"翻译目录不存在: {dir_path}")

        catalogs = []
        for file_path in sorted(dir_path.iterdir()):
            if file_path.suffix.lower() not in CATALOG_SUFFIXES:
                continue
            language = Language.parse(file_path.stem)
            if language is None:
                logger.warning(f"跳过未注册语言的翻译文件: {file_path.name}")
                continue
            catalogs.append(Catalog.from_file(language, file_path))
            logger.debug(f"Loaded catalog {language.value} from {file_path}")

        registry = cls(catalogs, default=default)
        for language, missing in registry.integrity_report().items():
            logger.warning(f"翻译目录 '{language.value}' 缺少 key: {missing}")
        return registry


# 进程级只读注册表
DEFAULT_REGISTRY = CatalogRegistry.from_directory(LOCALES_DIR)

"""本地化目录与语言解析"""
from .languages import Language, DEFAULT_LANGUAGE
from .catalog import (
    Catalog,
    CatalogRegistry,
    CatalogError,
    CatalogLoadError,
    CatalogRegistryError,
    DEFAULT_REGISTRY,
    LOCALES_DIR,
)
from .resolver import LANGUAGE_ENV_VAR, LocaleConfig, resolve_active_language, get_current_language
from .accessor import get_locale

__all__ = [
    "Language",
    "DEFAULT_LANGUAGE",
    "Catalog",
    "CatalogRegistry",
    "CatalogError",
    "CatalogLoadError",
    "CatalogRegistryError",
    "DEFAULT_REGISTRY",
    "LOCALES_DIR",
    "LANGUAGE_ENV_VAR",
    "LocaleConfig",
    "resolve_active_language",
    "get_current_language",
    "get_locale",
]

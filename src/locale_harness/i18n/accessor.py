"""
Catalog 访问入口

get_locale() 是全函数：任何输入都返回一个可用的 Catalog。
未注册的语言记录一条 WARNING 并回退到默认语言目录。
"""
from typing import Optional, Union

from ..utils.logger import logger
from .catalog import DEFAULT_REGISTRY, Catalog, CatalogRegistry
from .languages import Language
from .resolver import resolve_active_language


def get_locale(lang: Optional[Union[str, Language]] = None,
               registry: CatalogRegistry = DEFAULT_REGISTRY) -> Catalog:
    """获取语言对应的翻译目录

    Args:
        lang: 语言代码；None 时通过 resolve_active_language() 解析
        registry: 目录注册表，默认使用内置目录

    Returns:
        Catalog: 请求的语言目录；未注册时返回默认语言目录
    """
    if lang is None:
        lang = resolve_active_language()

    language = Language.parse(lang)
    if language is not None and language in registry:
        return registry[language]

    logger.warning(
        f"未注册的语言 '{lang}'，回退到默认语言目录 '{registry.default_language.value}'"
    )
    return registry.default

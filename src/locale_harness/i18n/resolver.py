"""
当前运行语言解析

resolve_active_language() 每次调用都重新读取 TEST_LANG，不缓存、无副作用。
它只做透传：未注册的语言代码原样返回，回退到默认目录发生在 get_locale()。

LocaleConfig 是进程级的语言配置快照，在测试会话开始时构建一次后按值传递。
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .languages import DEFAULT_LANGUAGE, Language

LANGUAGE_ENV_VAR = "TEST_LANG"


def resolve_active_language(environ: Optional[Mapping[str, str]] = None,
                            env_var: str = LANGUAGE_ENV_VAR) -> str:
    """返回当前运行的语言代码

    Args:
        environ: 环境变量映射，默认 os.environ（调用时读取）
        env_var: 环境变量名

    Returns:
        str: 环境变量的原始值；缺失或为空时返回 "en"
    """
    source = os.environ if environ is None else environ
    value = source.get(env_var)
    if value is None or not value.strip():
        return DEFAULT_LANGUAGE.value
    return value


# 别名
get_current_language = resolve_active_language


@dataclass(frozen=True)
class LocaleConfig:
    """进程级语言配置

    language 保留原始输入（可能是未注册的代码），is_supported 标识是否会触发回退。
    """
    language: str
    default_language: Language = DEFAULT_LANGUAGE
    env_var: str = LANGUAGE_ENV_VAR

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None,
                         env_var: str = LANGUAGE_ENV_VAR) -> "LocaleConfig":
        return cls(language=resolve_active_language(environ, env_var), env_var=env_var)

    @property
    def is_supported(self) -> bool:
        return Language.parse(self.language) is not None

    @property
    def effective_language(self) -> Language:
        """实际使用的目录语言（未注册时为默认语言）"""
        return Language.parse(self.language) or self.default_language

    def catalog(self, registry=None):
        """返回本配置对应的 Catalog（带回退）"""
        from .accessor import get_locale
        if registry is None:
            return get_locale(self.language)
        return get_locale(self.language, registry=registry)

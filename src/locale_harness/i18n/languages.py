"""
受支持的语言标识

语言集合在构建时固定，新增语言需要同时新增枚举成员和 locales/<code>.yaml。
"""
from enum import Enum
from typing import Optional


class Language(str, Enum):
    """受支持的语言（值为两位语言代码）"""
    EN = "en"
    FR = "fr"
    DE = "de"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Language"]:
        """按语言代码精确查找 Language（区分大小写，不去空白）；未注册的代码返回 None，不抛异常"""
        if isinstance(value, cls):
            return value
        if not value or not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


DEFAULT_LANGUAGE = Language.EN

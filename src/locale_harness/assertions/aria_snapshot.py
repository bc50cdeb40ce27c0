"""
ARIA 结构快照模板（Structural Snapshot）

与语言无关的页面结构描述，语法即 Playwright 的 aria snapshot 模板::

    - listitem:
      - text: Language
      - paragraph: Change the language

匹配由 Playwright 完成（expect(locator).to_match_aria_snapshot），这里只负责
保存模板文本，并在加载时检查它是合法的 YAML 列表，便于页面对象把模板定义成常量。
"""
import textwrap
from typing import Union

import yaml

from .errors import SnapshotParseError


class StructuralSnapshot:
    """一份 ARIA 快照模板"""

    def __init__(self, source: str):
        text = textwrap.dedent(source).strip()
        if not text:
            raise SnapshotParseError("ARIA 快照模板为空")
        try:
            entries = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SnapshotParseError(f"ARIA 快照模板不是合法的 YAML: {e}") from e
        if not isinstance(entries, list):
            raise SnapshotParseError(f"ARIA 快照模板的根节点必须是列表: {type(entries).__name__}")
        self._source = text
        self._entries = len(entries)

    @classmethod
    def from_yaml(cls, source: str) -> "StructuralSnapshot":
        return cls(source)

    @classmethod
    def coerce(cls, value: Union["StructuralSnapshot", str]) -> "StructuralSnapshot":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(value)
        raise TypeError(f"不支持的快照类型: {type(value).__name__}")

    @property
    def node_count(self) -> int:
        """顶层节点数"""
        return self._entries

    def to_yaml(self) -> str:
        return self._source + "\n"

    def __str__(self) -> str:
        return self._source

    def __eq__(self, other) -> bool:
        if not isinstance(other, StructuralSnapshot):
            return NotImplemented
        return self._source == other._source

    def __hash__(self):
        return hash(self._source)

    def __repr__(self) -> str:
        return f"StructuralSnapshot(nodes={self._entries})"

"""
断言层异常体系

LocaleAssertionError 继承 AssertionError，pytest 将其报告为测试失败而不是错误。
消息统一包含场景名、语言、状态机步骤，便于区分 "UI 结构变化" 和 "翻译错误"。
"""
from typing import List, Optional, Tuple


class LocaleAssertionError(AssertionError):
    """本地化断言失败基类"""

    category = "assertion"

    def __init__(self, message: str, *, language: str, step: str, scenario: Optional[str] = None):
        self.language = language
        self.step = step
        self.scenario = scenario
        self.detail = message
        prefix = f"[{scenario}] " if scenario else ""
        super().__init__(f"{prefix}[lang={language}] [step={step}] [{self.category}] {message}")


class MissingCatalogKeyError(LocaleAssertionError):
    """内容检查引用的 key 在当前目录中不存在"""

    category = "missing-key"

    def __init__(self, key: str, *, language: str, step: str, scenario: Optional[str] = None):
        self.key = key
        super().__init__(
            f"翻译目录 '{language}' 缺少 key '{key}'",
            language=language, step=step, scenario=scenario
        )


class StructureMismatchError(LocaleAssertionError):
    """页面 ARIA 结构与期望快照不一致（UI 结构变化）"""

    category = "structure"

    def __init__(self, expected: str, actual: str, *, anchor: str, language: str, step: str,
                 scenario: Optional[str] = None, reason: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.anchor = anchor
        self.reason = reason
        lines = [f"锚点 {anchor} 的 ARIA 结构与期望快照不匹配"]
        if reason:
            lines.append(reason.splitlines()[0])
        lines.append("期望:\n" + expected.rstrip())
        lines.append("实际:\n" + (actual.rstrip() or "<empty>"))
        super().__init__("\n".join(lines), language=language, step=step, scenario=scenario)


class ContentMismatchError(LocaleAssertionError):
    """页面文本与目录中的本地化文本不一致（翻译错误）"""

    category = "content"

    def __init__(self, key: str, expected: str, failures: List[Tuple[str, str]], *, language: str,
                 step: str, scenario: Optional[str] = None):
        self.key = key
        self.expected = expected
        self.failures = failures
        details = "\n".join(f"  - {target}: {error.splitlines()[0] if error else ''}" for target, error in failures)
        super().__init__(
            f"key '{key}' 期望文本 {expected!r}，{len(failures)} 个目标不匹配:\n{details}",
            language=language, step=step, scenario=scenario
        )


class ScenarioStateError(RuntimeError):
    """场景步骤调用顺序错误"""


class SnapshotParseError(ValueError):
    """ARIA 快照模板格式错误"""

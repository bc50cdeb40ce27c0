"""
本地化场景状态机

每个场景（语言 × 用例）按固定顺序执行:

    NOT_STARTED -> NAVIGATED -> INTERACTED* -> ASSERTED_STRUCTURE -> ASSERTED_CONTENT -> COMPLETED

结构检查与语言无关（页面形状），内容检查与语言相关（目录中的文本）。
任何断言失败都会把场景置为 FAILED 并记录失败步骤，之后的步骤不再执行。
页面交互异常（超时、元素不存在）原样抛出，同样记录为失败步骤。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Literal, Optional, Sequence, Tuple, Union

import allure
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page, expect

from ..config import settings
from ..i18n import Catalog
from ..utils.logger import log_duration, logger
from ..utils.selector_helper import Selector, SelectorHelper, SelectorLike
from .aria_snapshot import StructuralSnapshot
from .errors import (
    ContentMismatchError,
    LocaleAssertionError,
    MissingCatalogKeyError,
    ScenarioStateError,
    StructureMismatchError,
)

DEFAULT_ASSERTION_TIMEOUT = 5000  # milliseconds
ACTUAL_SNAPSHOT_TIMEOUT = 1000  # milliseconds

SnapshotLike = Union[StructuralSnapshot, str]
TargetsLike = Union[SelectorLike, Iterable[SelectorLike]]


class ScenarioStep(str, Enum):
    NOT_STARTED = "not_started"
    NAVIGATED = "navigated"
    INTERACTED = "interacted"
    ASSERTED_STRUCTURE = "asserted_structure"
    ASSERTED_CONTENT = "asserted_content"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ScenarioResult:
    """供外部运行器汇总的场景结果"""
    name: str
    language: str
    status: ScenarioStep
    failed_step: Optional[ScenarioStep] = None
    error: Optional[str] = None
    history: List[Tuple[ScenarioStep, str]] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == ScenarioStep.COMPLETED


class LocaleScenario:
    """单个语言下的 UI 验证场景"""

    def __init__(self, name: str, page: Page, catalog: Catalog, language: Optional[str] = None,
                 timeout: Optional[int] = None):
        """
        Args:
            name: 场景名（出现在失败信息中）
            page: Playwright Page
            catalog: 当前语言的翻译目录
            language: 运行语言的原始标识，默认取目录语言（回退时两者可能不同）
            timeout: 断言超时（毫秒），默认取 settings.timeouts.assertion
        """
        self.name = name
        self.page = page
        self.catalog = catalog
        self.language = language or catalog.language.value
        self.timeout = timeout if timeout is not None else settings.get("timeouts.assertion", DEFAULT_ASSERTION_TIMEOUT)
        self.step = ScenarioStep.NOT_STARTED
        self.failed_step: Optional[ScenarioStep] = None
        self.error: Optional[BaseException] = None
        self.history: List[Tuple[ScenarioStep, str]] = []

    def __repr__(self) -> str:
        return f"LocaleScenario(name={self.name!r}, language={self.language!r}, step={self.step.value!r})"

    # ==================== 状态机 ====================

    def _enter(self, target: ScenarioStep, allowed: Sequence[ScenarioStep]) -> None:
        if self.step == ScenarioStep.FAILED:
            raise ScenarioStateError(
                f"[{self.name}] 场景已在步骤 '{self.failed_step.value}' 失败，不能继续执行 '{target.value}'"
            )
        if self.step not in allowed:
            raise ScenarioStateError(
                f"[{self.name}] 不能从步骤 '{self.step.value}' 进入 '{target.value}'"
                f"（允许的前置步骤: {[s.value for s in allowed]}）"
            )

    def _advance(self, target: ScenarioStep, detail: str) -> None:
        self.step = target
        self.history.append((target, detail))
        logger.info(f"[{self.name}] [lang={self.language}] {target.value}: {detail}")

    def _fail(self, attempted: ScenarioStep, error: BaseException) -> None:
        self.failed_step = attempted
        self.error = error
        self.step = ScenarioStep.FAILED
        self.history.append((ScenarioStep.FAILED, f"{attempted.value}: {type(error).__name__}"))
        logger.error(f"[{self.name}] [lang={self.language}] failed at {attempted.value}: {error}")
        try:
            allure.attach(str(error), name=f"{self.name}_{attempted.value}_failure",
                          attachment_type=allure.attachment_type.TEXT)
        except (TypeError, ValueError):
            logger.debug("Allure attach failed", exc_info=True)

    def _run(self, target: ScenarioStep, action: Callable[[], None]) -> None:
        """执行一步；任何异常都记录为该步骤失败后原样抛出"""
        try:
            action()
        except Exception as e:
            self._fail(target, e)
            raise

    def _locator(self, target: SelectorLike) -> Locator:
        return SelectorHelper.resolve_locator(self.page, target, self.catalog)

    # ==================== 步骤 ====================

    def navigate(self, url: Optional[str] = None, action: Optional[Callable[[], None]] = None) -> "LocaleScenario":
        """导航到页面（url 或自定义 action，二选一）"""
        self._enter(ScenarioStep.NAVIGATED, [ScenarioStep.NOT_STARTED])
        if (url is None) == (action is None):
            raise ValueError("navigate() 需要且只需要 url 或 action 之一")

        with allure.step(f"[{self.language}] navigate {url or getattr(action, '__name__', 'action')}"):
            self._run(ScenarioStep.NAVIGATED, action or (lambda: self.page.goto(url)))
        self._advance(ScenarioStep.NAVIGATED, url or getattr(action, "__name__", "action"))
        return self

    def interact(self, description: str, action: Callable[[], None]) -> "LocaleScenario":
        """执行一次页面交互（打开面板、关闭遮罩等），可调用多次"""
        self._enter(ScenarioStep.INTERACTED, [ScenarioStep.NAVIGATED, ScenarioStep.INTERACTED])
        with allure.step(f"[{self.language}] {description}"):
            self._run(ScenarioStep.INTERACTED, action)
        self._advance(ScenarioStep.INTERACTED, description)
        return self

    def assert_structure(self, anchor: SelectorLike, expected: SnapshotLike,
                         timeout: Optional[int] = None) -> "LocaleScenario":
        """结构检查：锚点处的 ARIA 树必须匹配期望快照模板

        由 Playwright 的 to_match_aria_snapshot 在超时内重试匹配。
        """
        self._enter(ScenarioStep.ASSERTED_STRUCTURE,
                    [ScenarioStep.NAVIGATED, ScenarioStep.INTERACTED, ScenarioStep.ASSERTED_STRUCTURE])
        timeout = timeout if timeout is not None else self.timeout
        snapshot = StructuralSnapshot.coerce(expected)

        def check():
            locator = self._locator(anchor)
            try:
                expect(locator).to_match_aria_snapshot(snapshot.to_yaml(), timeout=timeout)
            except AssertionError as e:
                if isinstance(e, LocaleAssertionError):
                    raise
                raise StructureMismatchError(
                    snapshot.to_yaml(), self._actual_snapshot(locator),
                    anchor=str(anchor),
                    language=self.language,
                    step=ScenarioStep.ASSERTED_STRUCTURE.value,
                    scenario=self.name,
                    reason=str(e),
                ) from e

        with allure.step(f"[{self.language}] structure at {anchor}"), log_duration(f"{self.name} structure"):
            self._run(ScenarioStep.ASSERTED_STRUCTURE, check)
        self._advance(ScenarioStep.ASSERTED_STRUCTURE, f"{anchor} matches {snapshot.node_count} node(s)")
        return self

    @staticmethod
    def _actual_snapshot(locator: Locator) -> str:
        """失败信息中的实际 ARIA 树；取不到时为空"""
        try:
            return locator.aria_snapshot(timeout=ACTUAL_SNAPSHOT_TIMEOUT)
        except PlaywrightError:
            logger.debug("aria_snapshot unavailable after structure mismatch", exc_info=True)
            return ""

    def _expected_text(self, key: str) -> str:
        value = self.catalog.get(key)
        if value is None:
            error = MissingCatalogKeyError(key, language=self.language, step=ScenarioStep.ASSERTED_CONTENT.value,
                                           scenario=self.name)
            self._fail(ScenarioStep.ASSERTED_CONTENT, error)
            raise error
        return value

    def assert_content(self, key: str, targets: TargetsLike,
                       match: Literal["contains", "equals"] = "contains",
                       timeout: Optional[int] = None) -> "LocaleScenario":
        """内容检查：每个目标元素的文本都必须匹配目录中 key 的值

        多个目标（如 role+name 和 test id 两种定位方式）各自独立断言，失败信息列出全部不匹配的目标。
        """
        self._enter(ScenarioStep.ASSERTED_CONTENT,
                    [ScenarioStep.ASSERTED_STRUCTURE, ScenarioStep.ASSERTED_CONTENT])
        if match not in ("contains", "equals"):
            raise ValueError(f"不支持的匹配方式: {match}")
        timeout = timeout if timeout is not None else self.timeout
        expected_text = self._expected_text(key)

        if isinstance(targets, (Selector, str, Locator)):
            targets = [targets]
        targets = list(targets)
        if not targets:
            raise ValueError("assert_content() 至少需要一个目标元素")

        def check():
            failures = []
            for target in targets:
                locator = self._locator(target)
                try:
                    if match == "equals":
                        expect(locator).to_have_text(expected_text, timeout=timeout)
                    else:
                        expect(locator).to_contain_text(expected_text, timeout=timeout)
                except AssertionError as e:
                    if isinstance(e, LocaleAssertionError):
                        raise
                    failures.append((str(target), str(e)))
            if failures:
                raise ContentMismatchError(key, expected_text, failures, language=self.language,
                                           step=ScenarioStep.ASSERTED_CONTENT.value, scenario=self.name)

        with allure.step(f"[{self.language}] content '{key}' = {expected_text!r}"):
            self._run(ScenarioStep.ASSERTED_CONTENT, check)
        self._advance(ScenarioStep.ASSERTED_CONTENT, f"'{key}' {match} {expected_text!r} on {len(targets)} target(s)")
        return self

    def assert_title(self, key: str, timeout: Optional[int] = None) -> "LocaleScenario":
        """内容检查的页面标题形式"""
        self._enter(ScenarioStep.ASSERTED_CONTENT,
                    [ScenarioStep.ASSERTED_STRUCTURE, ScenarioStep.ASSERTED_CONTENT])
        timeout = timeout if timeout is not None else self.timeout
        expected_text = self._expected_text(key)

        def check():
            try:
                expect(self.page).to_have_title(expected_text, timeout=timeout)
            except AssertionError as e:
                if isinstance(e, LocaleAssertionError):
                    raise
                raise ContentMismatchError(key, expected_text, [("page title", str(e))], language=self.language,
                                           step=ScenarioStep.ASSERTED_CONTENT.value, scenario=self.name) from e

        with allure.step(f"[{self.language}] title '{key}' = {expected_text!r}"):
            self._run(ScenarioStep.ASSERTED_CONTENT, check)
        self._advance(ScenarioStep.ASSERTED_CONTENT, f"title '{key}' = {expected_text!r}")
        return self

    def complete(self) -> ScenarioResult:
        self._enter(ScenarioStep.COMPLETED, [ScenarioStep.ASSERTED_CONTENT])
        self._advance(ScenarioStep.COMPLETED, "all checks passed")
        return self.result()

    def result(self) -> ScenarioResult:
        return ScenarioResult(
            name=self.name,
            language=self.language,
            status=self.step,
            failed_step=self.failed_step,
            error=str(self.error) if self.error else None,
            history=list(self.history),
        )

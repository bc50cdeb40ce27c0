"""
Selector 模型与多策略定位

同一个元素可以用多种独立方式描述（角色 + 可访问名称、test id、CSS ...），
带 *_key 的字段在解析前用当前语言的 Catalog 替换成本地化文本，
因此一个 Selector 可以在所有语言下复用。
"""
from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, List, Literal, Optional, Pattern, Tuple, Union

import allure
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .logger import logger

DEFAULT_WAIT_TIMEOUT = 5000  # milliseconds
DEFAULT_RETRIES = 3
DEFAULT_INITIAL_DELAY = 0.5  # seconds
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_MAX_DELAY = 5.0

WaitState = Literal["attached", "detached", "hidden", "visible"]


# ---- Exceptions ----
class SelectorError(Exception):
    """Base selector-related error."""


class SelectorResolutionError(SelectorError):
    """No strategy of the selector produced a locator."""


class LocatorWaitTimeoutError(SelectorError):
    """The locator never reached the wanted state before retries ran out."""

    def __init__(self, message: str, attempts: List[Dict[str, Any]]):
        super().__init__(message)
        self.attempts = attempts


@dataclass(frozen=True)
class ResolveInfo:
    """How a locator was obtained: winning strategy, every strategy tried, catalog language."""
    strategy: str
    attempts: List[Dict[str, Any]]
    locale: Optional[str] = None


@dataclass(frozen=True)
class Selector:
    """
    结构化的元素描述

    策略按顺序尝试: test_id, role(+name), label, placeholder, css, xpath, text。
    role_name_key / label_key / text_key 是 Catalog 中的 key。
    inner_css 在解析结果内继续定位子元素（如 test_id="select", inner_css="p"）。
    """
    test_id: Optional[str] = None
    role: Optional[str] = None
    role_name: Optional[Union[str, Pattern]] = None
    role_name_key: Optional[str] = None
    exact: Optional[bool] = None
    label: Optional[str] = None
    label_key: Optional[str] = None
    placeholder: Optional[str] = None
    css: Optional[str] = None
    xpath: Optional[str] = None
    text: Optional[str] = None
    text_key: Optional[str] = None
    inner_css: Optional[str] = None
    first: bool = False

    description: Optional[str] = None

    def __str__(self) -> str:
        if self.description:
            return self.description
        fields = {k: v for k, v in self.__dict__.items() if v is not None and v is not False}
        return "Selector(" + ", ".join(f"{k}={v!r}" for k, v in fields.items()) + ")"

    @property
    def keys(self) -> Dict[str, str]:
        """本 Selector 引用的 Catalog key（目标字段 -> key）"""
        pairs = (("role_name", self.role_name_key), ("label", self.label_key), ("text", self.text_key))
        return {target: key for target, key in pairs if key}


SelectorLike = Union[Selector, str, Locator]


def _localize(selector: Selector, catalog) -> Selector:
    """用 Catalog 填充 *_key 对应的字段

    缺失的 key 只记录警告，字段保持为空，交给后续策略。
    """
    if catalog is None:
        return selector

    localized = {}
    for target, key in selector.keys.items():
        if getattr(selector, target):
            continue
        value = catalog.get(key)
        if value:
            localized[target] = value
        else:
            logger.warning(f"Selector key '{key}' missing in catalog '{catalog.language.value}' ({selector})")
    return replace(selector, **localized) if localized else selector


def _by_role(page: Page, s: Selector) -> Optional[Tuple[str, Locator]]:
    if s.role_name:
        return "get_by_role+name", page.get_by_role(s.role, name=s.role_name, exact=s.exact)
    if s.role_name_key:
        # key 未能本地化时不退化成只按角色匹配
        return None
    return "get_by_role", page.get_by_role(s.role)


# (Selector 字段, 定位函数)；定位函数返回 (策略名, Locator) 或 None 表示跳过
_STRATEGIES: List[Tuple[str, Callable[[Page, Selector], Optional[Tuple[str, Locator]]]]] = [
    ("test_id", lambda page, s: ("get_by_test_id", page.get_by_test_id(s.test_id))),
    ("role", _by_role),
    ("label", lambda page, s: ("get_by_label", page.get_by_label(s.label))),
    ("placeholder", lambda page, s: ("get_by_placeholder", page.get_by_placeholder(s.placeholder))),
    ("css", lambda page, s: ("css", page.locator(s.css))),
    ("xpath", lambda page, s: ("xpath", page.locator(f"xpath={s.xpath}"))),
    ("text", lambda page, s: ("get_by_text", page.get_by_text(s.text))),
]


def _attach_to_allure(name: str, payload: Any):
    """附件失败不影响测试"""
    try:
        content = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
        allure.attach(content, name=name, attachment_type=allure.attachment_type.JSON)
    except (TypeError, ValueError):
        logger.debug("Allure attach failed for %s", name, exc_info=True)


def _backoff(attempt: int, initial: float, factor: float, max_delay: float) -> float:
    return min(initial * (factor ** (attempt - 1)), max_delay)


class SelectorHelper:
    @staticmethod
    def resolve_with_meta(page: Page, selector: SelectorLike, catalog=None) -> Tuple[Locator, ResolveInfo]:
        """
        解析为 (Locator, ResolveInfo)，不等待元素出现

        - Locator: 原样返回
        - str: page.locator(selector)
        - Selector: 本地化后按策略顺序取第一个可用的

        Raises:
            SelectorResolutionError
        """
        locale = catalog.language.value if catalog is not None else None

        if isinstance(selector, Locator):
            return selector, ResolveInfo("locator_object", [], locale)

        if isinstance(selector, str):
            try:
                return page.locator(selector), ResolveInfo(
                    "raw_string", [{"strategy": "raw_string", "value": selector}], locale
                )
            except PlaywrightError as e:
                raise SelectorResolutionError(f"Raw string selector failed to produce a locator: {selector}") from e

        if not isinstance(selector, Selector):
            raise SelectorResolutionError(f"Unsupported selector type: {type(selector)}")

        selector = _localize(selector, catalog)
        attempts: List[Dict[str, Any]] = []
        for field_name, build in _STRATEGIES:
            value = getattr(selector, field_name)
            if not value:
                continue
            attempts.append({"strategy": field_name, "value": str(value)})
            try:
                built = build(page, selector)
            except PlaywrightError:
                logger.debug("%s strategy failed for %s", field_name, selector, exc_info=True)
                continue
            if built is None:
                continue

            strategy, loc = built
            if selector.inner_css:
                loc = loc.locator(selector.inner_css)
            if selector.first:
                loc = loc.first
            info = ResolveInfo(strategy, attempts, locale)
            logger.debug("Selector %s resolved via %s (locale=%s)", selector, strategy, locale)
            _attach_to_allure("resolve_meta", {"selector": str(selector), **asdict(info)})
            return loc, info

        _attach_to_allure("resolution_failed", {"selector": str(selector), "attempts": attempts, "locale": locale})
        raise SelectorResolutionError(f"Unable to resolve locator for selector: {selector}")

    @staticmethod
    def resolve_locator(page: Page, selector: SelectorLike, catalog=None) -> Locator:
        return SelectorHelper.resolve_with_meta(page, selector, catalog)[0]

    @staticmethod
    def find(
            page: Page,
            selector: SelectorLike,
            wait_for: Optional[WaitState] = "visible",
            timeout: Optional[int] = None,
            *,
            catalog=None,
            retries: int = DEFAULT_RETRIES,
            initial_delay: float = DEFAULT_INITIAL_DELAY,
            backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
            max_delay: float = DEFAULT_MAX_DELAY
    ) -> Locator:
        """
        解析并等待元素达到 wait_for 状态，超时后按指数退避重试

        Raises:
            LocatorWaitTimeoutError: 重试耗尽
            SelectorResolutionError: 无法解析
        """
        timeout = DEFAULT_WAIT_TIMEOUT if timeout is None else timeout
        loc, meta = SelectorHelper.resolve_with_meta(page, selector, catalog)
        if not wait_for:
            return loc

        retries = max(1, retries)
        failures: List[Dict[str, Any]] = []
        for attempt in range(1, retries + 1):
            try:
                loc.wait_for(state=wait_for, timeout=timeout)
                return loc
            except PlaywrightTimeoutError as e:
                failures.append({"attempt": attempt, "wait_for": wait_for, "timeout_ms": timeout,
                                 "error": str(e), "strategy": meta.strategy})
                logger.warning("Selector wait attempt %s/%s failed: %s", attempt, retries, selector)
            if attempt < retries:
                time.sleep(_backoff(attempt, initial_delay, backoff_factor, max_delay))

        _attach_to_allure("find_failed", {"selector": str(selector), "attempts": failures})
        raise LocatorWaitTimeoutError(f"Waiting for selector timed out after {retries} attempts: {selector}",
                                      failures)

    @staticmethod
    def exists(page: Page, selector: SelectorLike, *, catalog=None, timeout: Optional[int] = None) -> bool:
        """元素是否存在；给定 timeout 时先等待 attached"""
        try:
            loc = SelectorHelper.resolve_locator(page, selector, catalog)
        except SelectorResolutionError:
            return False

        if timeout:
            try:
                loc.wait_for(state="attached", timeout=timeout)
            except PlaywrightTimeoutError:
                return False
        return loc.count() > 0

    @staticmethod
    def same_element(page: Page, first: SelectorLike, second: SelectorLike, *, catalog=None,
                     timeout: Optional[int] = None) -> bool:
        """两种独立定位方式（如角色 + 名称、test id）是否指向同一个 DOM 节点"""
        timeout = DEFAULT_WAIT_TIMEOUT if timeout is None else timeout
        loc_a = SelectorHelper.resolve_locator(page, first, catalog)
        handle = SelectorHelper.resolve_locator(page, second, catalog).element_handle(timeout=timeout)
        try:
            return bool(loc_a.evaluate("(el, other) => el === other", handle, timeout=timeout))
        finally:
            handle.dispose()

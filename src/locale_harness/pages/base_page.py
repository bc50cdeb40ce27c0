"""
BasePage - Page Object Pattern 基类

封装 SelectorHelper 的定位能力，并把当前语言的 Catalog 传给定位器，
使带 *_key 的 Selector 在每种语言下解析为对应的本地化文本。
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple
from urllib.parse import urljoin

from playwright.sync_api import Locator, Page, Response

from ..config import settings
from ..i18n import Catalog
from ..utils.logger import logger
from ..utils.selector_helper import ResolveInfo, SelectorHelper, SelectorLike


class BasePage:
    """页面对象基类 - 封装通用的页面操作方法"""

    # 默认等待超时时间（毫秒）
    DEFAULT_TIMEOUT = 5000

    # 默认重试次数
    DEFAULT_RETRIES = 3

    # 相对 base_url 的页面路径
    PATH = "/"

    def __init__(self, page: Page, catalog: Optional[Catalog] = None, base_url: Optional[str] = None):
        """
        Args:
            page: Playwright Page 对象
            catalog: 当前语言的翻译目录（用于本地化 Selector）
            base_url: 基础 URL，默认取 settings.base_url
        """
        self.page = page
        self.catalog = catalog
        self.base_url = base_url if base_url is not None else settings.base_url
        self._load_time: Optional[float] = None

    # ==================== 导航相关方法 ====================

    def goto(self, url: str, timeout: Optional[int] = None, wait_until: str = "load") -> Optional[Response]:
        """
        导航到指定 URL（相对路径拼接 base_url）

        Raises:
            PlaywrightTimeoutError: 导航超时
        """
        if not url.startswith(("http://", "https://")) and self.base_url:
            url = urljoin(self.base_url, url)

        logger.info(f"Navigate to: {url}")

        start_time = time.time()
        response = self.page.goto(url, timeout=timeout, wait_until=wait_until)
        self._load_time = time.time() - start_time

        logger.info(f"Page loaded in {self._load_time:.2f}s")
        return response

    def open(self) -> None:
        """打开本页面"""
        self.goto(self.PATH)

    def title(self) -> str:
        return self.page.title()

    # ==================== 元素定位 ====================

    def resolve(self, selector: SelectorLike) -> Locator:
        """解析选择器并返回 Locator（不等待）"""
        return SelectorHelper.resolve_locator(self.page, selector, self.catalog)

    def resolve_with_info(self, selector: SelectorLike) -> Tuple[Locator, ResolveInfo]:
        return SelectorHelper.resolve_with_meta(self.page, selector, self.catalog)

    def find(
        self,
        selector: SelectorLike,
        wait_for: Optional[Literal["attached", "detached", "hidden", "visible"]] = "visible",
        timeout: Optional[int] = None,
        retries: Optional[int] = None,
    ) -> Locator:
        """
        查找元素并等待其达到指定状态

        Raises:
            LocatorWaitTimeoutError: 等待超时
            SelectorResolutionError: 选择器解析失败
        """
        return SelectorHelper.find(
            self.page,
            selector,
            wait_for=wait_for,
            timeout=timeout or self.DEFAULT_TIMEOUT,
            catalog=self.catalog,
            retries=retries or self.DEFAULT_RETRIES,
        )

    def exists(self, selector: SelectorLike, timeout: Optional[int] = None) -> bool:
        return SelectorHelper.exists(self.page, selector, catalog=self.catalog, timeout=timeout)

    # ==================== 交互 ====================

    def click(self, selector: SelectorLike, timeout: Optional[int] = None) -> None:
        """等待元素可见后点击"""
        timeout = timeout or self.DEFAULT_TIMEOUT
        locator = self.find(selector, wait_for="visible", timeout=timeout)
        logger.debug(f"Clicking element: {selector}")
        locator.click(timeout=timeout)

    def text(self, selector: SelectorLike, timeout: Optional[int] = None) -> str:
        """获取元素可见文本"""
        return self.find(selector, timeout=timeout).inner_text()

    def is_visible(self, selector: SelectorLike) -> bool:
        return self.resolve(selector).is_visible()

    def aria_snapshot(self, selector: SelectorLike, timeout: Optional[int] = None) -> str:
        """获取元素的 ARIA 快照（YAML 文本）"""
        return self.find(selector, timeout=timeout).aria_snapshot(timeout=timeout or self.DEFAULT_TIMEOUT)

    # ==================== 截图 ====================

    def screenshot_on_failure(self, name: str = "failure", full_page: bool = True) -> Optional[Path]:
        """失败时截图；截图本身失败只记录日志"""
        if not settings.screenshot_on_failure:
            return None
        language = self.catalog.language.value if self.catalog is not None else "na"
        path = Path(settings.screenshot_dir) / f"{name}_{language}_{int(time.time())}.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.page.screenshot(path=str(path), full_page=full_page)
        except Exception as e:
            logger.error(f"Failed to take screenshot: {e}")
            return None
        logger.info(f"Screenshot saved: {path}")
        return path

    @contextmanager
    def auto_screenshot_on_error(self, name: str = "operation"):
        """
        上下文管理器：操作失败时自动截图

        Usage:
            with settings_page.auto_screenshot_on_error("language_section"):
                scenario.assert_structure(...)
        """
        try:
            yield
        except Exception as e:
            logger.error(f"{name} failed: {e}")
            self.screenshot_on_failure(name=name)
            raise

    # ==================== 调试 ====================

    def debug_info(self, selector: SelectorLike) -> Dict[str, Any]:
        """获取选择器的调试信息（解析策略、是否存在、是否可见）"""
        locator, info = self.resolve_with_info(selector)
        return {
            "strategy": info.strategy,
            "locale": info.locale,
            "attempts": info.attempts,
            "exists": locator.count() > 0,
            "visible": locator.is_visible(),
        }

    def __repr__(self) -> str:
        language = self.catalog.language.value if self.catalog is not None else None
        return f"{self.__class__.__name__}(url={self.page.url!r}, locale={language!r})"

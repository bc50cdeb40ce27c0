"""
RHDH 设置页面对象
"""
from typing import List

from ..utils.logger import log_step
from ..utils.selector_helper import Selector
from .base_page import BasePage
from .settings_selector import (
    enter_button,
    hide_button,
    language_list,
    language_select_by_role,
    language_select_label,
    language_select_value,
)


class SettingsPage(BasePage):
    """RHDH 设置页"""

    PATH = "/settings"

    @log_step("打开设置页")
    def open(self) -> None:
        self.goto(self.PATH)

    @log_step("访客登录")
    def enter_as_guest(self) -> None:
        self.click(enter_button)

    @log_step("隐藏快速入门遮罩")
    def hide_overlay(self) -> None:
        self.click(hide_button)

    def language_section(self) -> Selector:
        """结构检查的锚点"""
        return language_list

    def language_select_targets(self) -> List[Selector]:
        """内容检查的目标：test id 定位的两个元素"""
        return [language_select_label, language_select_value]

    def language_select_strategies(self) -> List[Selector]:
        """同一个语言选择器的两种独立定位方式：角色 + 名称、test id"""
        return [language_select_by_role, Selector(test_id="select", description="语言选择器 (data-testid=select)")]

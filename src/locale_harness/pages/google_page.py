"""
Google 首页页面对象
"""
from ..config import settings
from ..utils.logger import log_step
from .base_page import BasePage
from .google_selector import consent_accept, gmail_link


class GoogleHomePage(BasePage):
    """Google 首页"""

    def __init__(self, page, catalog=None, base_url=None):
        super().__init__(page, catalog=catalog, base_url=base_url or settings.google_url)

    @log_step("打开 Google 首页")
    def open(self) -> None:
        self.goto(self.base_url)

    def dismiss_consent(self) -> None:
        """有 cookie 弹窗时点击同意"""
        if self.exists(consent_accept, timeout=2000):
            self.click(consent_accept)

    @log_step("打开 Gmail")
    def open_gmail(self) -> None:
        self.click(gmail_link)

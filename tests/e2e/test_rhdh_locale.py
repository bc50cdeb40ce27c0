"""
RHDH 设置页语言验证（需要运行中的 RHDH 实例）

运行: TEST_LANG=fr pytest -m e2e tests/e2e/test_rhdh_locale.py --alluredir=reports/allure-results
"""
import pytest

from locale_harness.assertions import LocaleScenario
from locale_harness.pages import SettingsPage
from locale_harness.pages.settings_selector import language_section_snapshot
from locale_harness.utils.selector_helper import SelectorHelper

pytestmark = pytest.mark.e2e


@pytest.fixture
def settings_page(page, catalog):
    return SettingsPage(page, catalog)


def test_language_section(page, catalog, active_language, settings_page):
    scenario = LocaleScenario("rhdh_settings_language", page, catalog, language=active_language)

    with settings_page.auto_screenshot_on_error("rhdh_settings_language"):
        result = (scenario
                  .navigate(action=settings_page.open)
                  .interact("enter as guest", settings_page.enter_as_guest)
                  .interact("hide quick start", settings_page.hide_overlay)
                  .assert_structure(settings_page.language_section(), language_section_snapshot)
                  .assert_content("rhdhLanguage", settings_page.language_select_targets())
                  .complete())

    assert result.passed


def test_language_select_strategies_agree(page, catalog, settings_page):
    """角色 + 本地化名称 与 test id 两种定位指向同一个语言选择器"""
    settings_page.open()
    settings_page.enter_as_guest()
    settings_page.hide_overlay()

    by_role, by_test_id = settings_page.language_select_strategies()
    assert SelectorHelper.same_element(page, by_role, by_test_id, catalog=catalog)

import tempfile
import unittest
from unittest.mock import MagicMock, patch

from locale_harness.i18n import get_locale
from locale_harness.pages import BasePage, GoogleHomePage, SettingsPage
from locale_harness.pages.settings_selector import language_section_snapshot


class TestSettingsPage(unittest.TestCase):
    """SettingsPage 单元测试"""

    def setUp(self):
        self.mock_page = MagicMock()
        self.mock_page.url = "http://localhost:3000/settings"
        self.settings_page = SettingsPage(self.mock_page, get_locale("fr"), base_url="http://localhost:3000")

    def test_open_joins_base_url(self):
        self.settings_page.open()
        self.mock_page.goto.assert_called_once_with("http://localhost:3000/settings", timeout=None, wait_until="load")

    def test_enter_as_guest(self):
        self.settings_page.enter_as_guest()
        self.mock_page.get_by_role.assert_called_once_with("button", name="Enter", exact=None)
        self.mock_page.get_by_role.return_value.click.assert_called_once()

    def test_language_select_targets_use_test_id(self):
        targets = self.settings_page.language_select_targets()
        self.assertEqual([t.test_id for t in targets], ["select", "select"])
        self.assertEqual([t.inner_css for t in targets], ["p", "div"])

    def test_language_select_strategies_are_independent(self):
        by_role, by_test_id = self.settings_page.language_select_strategies()
        self.assertIsNone(by_role.test_id)
        self.assertEqual(by_role.role_name_key, "rhdhLanguage")
        self.assertEqual(by_test_id.test_id, "select")

    def test_localized_debug_info(self):
        self.mock_page.get_by_role.return_value.count.return_value = 1
        info = self.settings_page.debug_info(self.settings_page.language_select_strategies()[0])
        self.assertEqual(info["strategy"], "get_by_role+name")
        self.assertEqual(info["locale"], "fr")
        self.assertTrue(info["exists"])
        self.mock_page.get_by_role.assert_called_once_with("combobox", name="Français", exact=None)

    def test_repr(self):
        self.assertEqual(repr(self.settings_page), "SettingsPage(url='http://localhost:3000/settings', locale='fr')")


class TestBasePageScreenshots(unittest.TestCase):
    def setUp(self):
        self.mock_page = MagicMock()
        self.base_page = BasePage(self.mock_page, get_locale("de"), base_url="http://localhost:3000")

    @patch("locale_harness.pages.base_page.settings")
    def test_screenshot_disabled(self, mock_settings):
        mock_settings.screenshot_on_failure = False
        self.assertIsNone(self.base_page.screenshot_on_failure("language_section"))
        self.mock_page.screenshot.assert_not_called()

    @patch("locale_harness.pages.base_page.settings")
    def test_screenshot_enabled(self, mock_settings):
        with tempfile.TemporaryDirectory() as tmp_dir:
            mock_settings.screenshot_on_failure = True
            mock_settings.screenshot_dir = tmp_dir
            path = self.base_page.screenshot_on_failure("language_section")

        self.assertIsNotNone(path)
        self.assertTrue(path.name.startswith("language_section_de_"))
        self.mock_page.screenshot.assert_called_once_with(path=str(path), full_page=True)

    @patch.object(BasePage, "screenshot_on_failure")
    def test_auto_screenshot_on_error(self, mock_screenshot):
        with self.assertRaises(RuntimeError):
            with self.base_page.auto_screenshot_on_error("structure"):
                raise RuntimeError("boom")
        mock_screenshot.assert_called_once_with(name="structure")


class TestGoogleHomePage(unittest.TestCase):
    def setUp(self):
        self.mock_page = MagicMock()
        self.google_page = GoogleHomePage(self.mock_page, get_locale("en"), base_url="https://www.google.com/")

    def test_open(self):
        self.google_page.open()
        self.mock_page.goto.assert_called_once_with("https://www.google.com/", timeout=None, wait_until="load")

    def test_dismiss_consent_when_present(self):
        self.mock_page.locator.return_value.count.return_value = 1
        self.google_page.dismiss_consent()
        self.mock_page.locator.return_value.click.assert_called_once()

    def test_dismiss_consent_when_absent(self):
        self.mock_page.locator.return_value.count.return_value = 0
        self.google_page.dismiss_consent()
        self.mock_page.locator.return_value.click.assert_not_called()


def test_language_section_snapshot_is_language_neutral():
    rendered = language_section_snapshot.to_yaml()
    for language in ("en", "fr", "de"):
        assert get_locale(language)["rhdhLanguage"] not in rendered

from .base_page import BasePage
from .settings_page import SettingsPage
from .google_page import GoogleHomePage

__all__ = ["BasePage", "SettingsPage", "GoogleHomePage"]

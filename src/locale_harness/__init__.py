"""
locale-harness: 多语言 UI 端到端验证

    from locale_harness.i18n import get_locale, get_current_language
    from locale_harness.assertions import LocaleScenario
"""

__version__ = "0.1.0"

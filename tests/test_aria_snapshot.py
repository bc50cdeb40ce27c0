import pytest

from locale_harness.assertions import SnapshotParseError, StructuralSnapshot
from locale_harness.pages.google_selector import search_form_snapshot
from locale_harness.pages.settings_selector import language_section_snapshot

LANGUAGE_SECTION = """
    - listitem:
      - text: Language
      - paragraph: Change the language
"""


class TestStructuralSnapshot:
    """ARIA 快照模板的加载与校验"""

    def test_indented_template_is_dedented(self):
        snapshot = StructuralSnapshot.from_yaml(LANGUAGE_SECTION)
        assert snapshot.to_yaml() == (
            "- listitem:\n"
            "  - text: Language\n"
            "  - paragraph: Change the language\n"
        )
        assert snapshot.node_count == 1

    def test_multiple_top_level_nodes(self):
        snapshot = StructuralSnapshot('- heading "Gmail" [level=1]\n- link /gmail/i\n')
        assert snapshot.node_count == 2

    @pytest.mark.parametrize("source", [
        "",
        "   \n",
        "listitem: Language",
        "- listitem: [unclosed",
    ])
    def test_invalid_template(self, source):
        with pytest.raises(SnapshotParseError):
            StructuralSnapshot(source)

    def test_coerce(self):
        snapshot = StructuralSnapshot(LANGUAGE_SECTION)
        assert StructuralSnapshot.coerce(snapshot) is snapshot
        assert StructuralSnapshot.coerce(LANGUAGE_SECTION) == snapshot
        with pytest.raises(TypeError):
            StructuralSnapshot.coerce(["- listitem"])

    def test_equality_ignores_indentation(self):
        assert StructuralSnapshot(LANGUAGE_SECTION) == StructuralSnapshot(
            "- listitem:\n  - text: Language\n  - paragraph: Change the language"
        )
        assert len({StructuralSnapshot(LANGUAGE_SECTION), StructuralSnapshot(LANGUAGE_SECTION)}) == 1

    def test_page_templates_are_language_neutral(self):
        """页面对象中的结构模板不包含任何本地化文本"""
        assert "Français" not in language_section_snapshot.to_yaml()
        assert "Deutsch" not in language_section_snapshot.to_yaml()
        assert language_section_snapshot.node_count == 1
        assert search_form_snapshot.node_count == 1

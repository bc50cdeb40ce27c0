import io
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from locale_harness.utils.data import InvalidYamlFormatError, load_yaml_file
from locale_harness.utils.logger import HandlerFactory, LogConfig, SecurityFormatter, log_duration, log_step
from locale_harness.utils.logger.config import parse_bool


class TestLoadYamlFile:
    """YAML 用例数据加载"""

    def test_single_case_is_wrapped(self, tmp_path):
        path = tmp_path / "cases.yaml"
        path.write_text("fr_language:\n  lang: fr\n  expected: Français\n", encoding="utf-8")
        assert load_yaml_file(path) == {"fr_language": [{"lang": "fr", "expected": "Français"}]}

    def test_multiple_cases(self, tmp_path):
        path = tmp_path / "cases.yaml"
        path.write_text("fallback:\n  - lang: xx\n  - lang: ja\n", encoding="utf-8")
        assert load_yaml_file(path)["fallback"] == [{"lang": "xx"}, {"lang": "ja"}]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "cases.yaml"
        path.write_text("", encoding="utf-8")
        assert load_yaml_file(path) == {}

    @pytest.mark.parametrize("content", [
        "- lang: fr\n",
        "group: fr\n",
        "group: []\n",
        "group:\n  - fr\n",
        "group:\n  - {}\n",
        "group: [unclosed\n",
    ])
    def test_invalid_format(self, tmp_path, content):
        path = tmp_path / "cases.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(InvalidYamlFormatError):
            load_yaml_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_file(tmp_path / "absent.yaml")


class TestSecurityFormatter:
    def _record(self, msg, args=()):
        return logging.LogRecord("automation", logging.ERROR, __file__, 10, msg, args, None, func="check")

    def test_multiline_message_is_single_line(self):
        formatter = SecurityFormatter(SecurityFormatter.STANDARD_FORMAT, SecurityFormatter.DATE_FORMAT)
        line = formatter.format(self._record("期望:\n- listitem\r\n实际:\n<empty>"))
        assert "\n" not in line and "\r" not in line
        assert "[test_support.py:check:10]" in line

    def test_ansi_sequences_removed_from_args(self):
        formatter = SecurityFormatter("%(message)s")
        assert formatter.format(self._record("lang=%s", ("\x1b[31mfr\x1b[0m",))) == "lang=fr"


class TestLogConfig:
    @pytest.fixture(autouse=True)
    def restore(self):
        yield
        LogConfig.initialize()

    def test_parse_bool(self):
        assert parse_bool("Yes")
        assert not parse_bool("off")
        assert parse_bool(True)

    def test_invalid_values_fall_back(self):
        LogConfig.initialize({"LOG_LEVEL": "verbose", "LOG_QUIET": "true", "LOG_BACKUP_COUNT": "many"})
        assert LogConfig.LOG_LEVEL == "INFO"
        assert LogConfig.BACKUP_COUNT == 7
        assert LogConfig.get("quiet") is True

    def test_initialize_resets_previous_values(self):
        LogConfig.initialize({"LOG_LEVEL": "debug"})
        assert LogConfig.LOG_LEVEL == "DEBUG"
        LogConfig.initialize({})
        assert LogConfig.LOG_LEVEL == "INFO"

    def test_main_log_file_per_language(self, monkeypatch):
        LogConfig.initialize({})
        assert LogConfig.main_log_file("fr") == "test_run.log"

        LogConfig.initialize({"LOG_PER_LANGUAGE": "true"})
        assert LogConfig.main_log_file("FR") == "test_run.fr.log"
        monkeypatch.delenv("TEST_LANG", raising=False)
        assert LogConfig.main_log_file() == "test_run.en.log"


class TestHandlerFactory:
    def test_unknown_type(self):
        with pytest.raises(ValueError):
            HandlerFactory.create_handler("syslog", "", logging.INFO)

    def test_rotated_files_go_to_history(self, tmp_path, monkeypatch):
        monkeypatch.setattr(LogConfig, "LOG_DIR", tmp_path)
        handler = HandlerFactory.create_handler("rotating", "error_test.log", logging.ERROR)
        try:
            assert isinstance(handler.formatter, SecurityFormatter)
            rotated = Path(handler.rotation_filename(str(tmp_path / "error_test.log.1")))
            assert rotated.parent == tmp_path.resolve() / "history"
            assert rotated.name.startswith("error_test.log.1.")
        finally:
            handler.close()

    def test_cleanup_survives_closed_stream(self, monkeypatch):
        """stdout 已被关闭时清理不报错，其余处理器照常关闭"""
        other = MagicMock(spec=logging.Handler)
        console = logging.StreamHandler(io.StringIO())
        console.stream.close()
        monkeypatch.setattr(HandlerFactory, "_handlers", [other, console])

        HandlerFactory.cleanup()

        other.flush.assert_called_once()
        other.close.assert_called_once()
        assert HandlerFactory.get_handler_count() == 0


def test_log_duration_writes_to_performance_logger():
    perf = MagicMock()
    with patch("locale_harness.utils.logger.components.LazyLogger") as mock_lazy:
        mock_lazy.get.return_value = perf
        with log_duration("rhdh_language structure"):
            pass

    assert mock_lazy.get.call_args[0][0] == "performance"
    assert mock_lazy.get.call_args[1]["separate_log_file"] == "performance.log"
    message, step = perf.info.call_args[0][:2]
    assert message.startswith("%s took")
    assert step == "rhdh_language structure"


def test_log_step_reraises_and_logs(caplog):
    log = logging.getLogger("locale_harness.test")
    log.propagate = True

    @log_step("切换语言", log)
    def switch():
        raise RuntimeError("select not found")

    with caplog.at_level(logging.INFO, logger="locale_harness.test"):
        with pytest.raises(RuntimeError):
            switch()

    messages = [record.getMessage() for record in caplog.records]
    assert "▶️ Step: 切换语言" in messages
    assert "❌ Failed: 切换语言 | select not found" in messages

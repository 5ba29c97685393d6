import logging
from unittest.mock import patch

from pythonjsonlogger.json import JsonFormatter

from pragatibook.logging import QUIET_LOGGERS, TEXT_FORMAT, configure_logging


class TestConfigureLogging:
    def test_json_format_tags_app(self):
        with patch("pragatibook.logging.settings") as mock_settings:
            mock_settings.app_name = "PragatiBook"
            mock_settings.log_level = "INFO"
            mock_settings.log_json = True
            configure_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        formatter = root.handlers[0].formatter
        assert isinstance(formatter, JsonFormatter)
        record = logging.LogRecord("pragatibook.test", logging.INFO, __file__, 1, "hello", None, None)
        output = formatter.format(record)
        assert '"app": "PragatiBook"' in output
        assert '"level": "INFO"' in output

    def test_text_format_and_level(self):
        with patch("pragatibook.logging.settings") as mock_settings:
            mock_settings.log_level = "debug"
            mock_settings.log_json = False
            configure_logging()

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert root.handlers[0].formatter._fmt == TEXT_FORMAT

    def test_arguments_override_settings(self):
        with patch("pragatibook.logging.settings") as mock_settings:
            mock_settings.app_name = "PragatiBook"
            mock_settings.log_level = "DEBUG"
            mock_settings.log_json = False
            configure_logging(level="warning", as_json=True)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self):
        with patch("pragatibook.logging.settings") as mock_settings:
            mock_settings.log_level = "chatty"
            mock_settings.log_json = False
            configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_repeat_calls_keep_one_handler(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_quiets_noisy_loggers(self):
        configure_logging(level="DEBUG")
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

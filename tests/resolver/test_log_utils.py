"""Tests for logging helpers."""

import logging

from pydantic import SecretStr

from resolver.configs.constants import REDACTED
from resolver.observability.log_utils import log_with_context, safe_log_value
from resolver.observability.logger import configure_logging, get_logger


class TestSafeLogValue:
    """Tests for safe_log_value()."""

    def test_secret_redacted(self) -> None:
        assert safe_log_value(SecretStr("hunter2")) == REDACTED

    def test_collections_summarized(self) -> None:
        assert safe_log_value(["a", "b"]) == "list(2 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"

    def test_truncates_long_values(self) -> None:
        result = safe_log_value("x" * 600, max_length=10)
        assert result.startswith("x" * 10)
        assert "truncated" in result

    def test_none(self) -> None:
        assert safe_log_value(None) == "None"


class TestLogWithContext:
    """Tests for log_with_context()."""

    def test_appends_context(self, caplog) -> None:
        logger = get_logger("tests.log_utils")

        with caplog.at_level(logging.INFO):
            log_with_context(logger, logging.INFO, "Resolving", name="metrics-prod", token=SecretStr("abc"))

        record = caplog.records[-1]
        assert "name=metrics-prod" in record.getMessage()
        assert "abc" not in record.getMessage()
        assert record.context == {"name": "metrics-prod", "token": REDACTED}


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_single_handler_after_reconfigure(self) -> None:
        """Reconfiguring replaces the handler instead of stacking them."""
        configure_logging("DEBUG")
        configure_logging("warning")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

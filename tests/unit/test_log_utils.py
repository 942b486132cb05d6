"""
Test suite for structured logging helpers.
"""

import logging

import pytest

from crud_adapter.configs import Settings
from crud_adapter.configs.database import DatabaseSettings
from crud_adapter.observability.logger import (
    configure_logging,
    configure_logging_from_settings,
)
from crud_adapter.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)


class TestSafeLogValue:
    """Test suite for safe_log_value()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "None"),
            ("text", "text"),
            ([1, 2, 3], "list(3 items)"),
            ((1,), "tuple(1 items)"),
            ({"a": 1}, "dict(1 keys)"),
            (42, "42"),
        ],
    )
    def test_should_summarize_values(self, value, expected: str) -> None:
        assert safe_log_value(value) == expected

    def test_should_truncate_long_strings(self) -> None:
        result = safe_log_value("x" * 20, max_length=5)

        assert result == "xxxxx... (truncated, 20 total)"


class TestLogWithContext:
    """Test suite for the context logging helpers."""

    def test_log_with_context_should_attach_extras(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        logger = logging.getLogger("tests.log_utils")

        with caplog.at_level(logging.DEBUG, logger="tests.log_utils"):
            log_with_context(logger, logging.DEBUG, "Patched", record_id=5, fields=["a", "b"])

        record = caplog.records[-1]
        assert record.getMessage() == "Patched"
        assert record.record_id == "5"
        assert record.fields == "list(2 items)"

    def test_log_exception_with_context_should_record_error(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        logger = logging.getLogger("tests.log_utils")

        with caplog.at_level(logging.WARNING, logger="tests.log_utils"):
            log_exception_with_context(
                logger, "Failed", ValueError("bad"), level=logging.WARNING, model="Person"
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad"
        assert record.model == "Person"
        assert not record.exc_info


class TestConfigureLogging:
    """Test suite for configure_logging()."""

    def test_should_install_single_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            configure_logging("debug")
            configure_logging("warning")

            assert len(root.handlers) == 1
            assert root.level == logging.WARNING
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_echo_sql_should_enable_engine_logging(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            configure_logging(echo_sql=True)

            assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.NOTSET)

    def test_should_configure_from_settings(self) -> None:
        # Arrange
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        settings = Settings(
            log_level="error",
            database=DatabaseSettings(echo_sql=True),
        )

        # Act
        try:
            configure_logging_from_settings(settings)

            # Assert
            assert len(root.handlers) == 1
            assert root.level == logging.ERROR
            assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.NOTSET)

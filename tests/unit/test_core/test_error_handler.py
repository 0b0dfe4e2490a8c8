"""
Unit tests for the error hierarchy and ErrorHandler.
"""

import logging

import pytest

from clockvoice.core.error_handler import (
    CaptureError,
    ClockVoiceError,
    ConfigurationError,
    ErrorHandler,
    ErrorSeverity,
    ResolverError,
)


class TestErrorHierarchy:
    """Test suite for ClockVoice exceptions"""

    @pytest.mark.unit
    def test_default_severity(self):
        error = ResolverError("bad model")
        assert error.severity == ErrorSeverity.MEDIUM
        assert error.message == "bad model"
        assert str(error) == "bad model"

    @pytest.mark.unit
    def test_configuration_errors_are_high(self):
        assert ConfigurationError("broken").severity == ErrorSeverity.HIGH

    @pytest.mark.unit
    def test_all_derive_from_base(self):
        assert issubclass(CaptureError, ClockVoiceError)
        assert issubclass(ConfigurationError, ClockVoiceError)


class TestErrorHandler:
    """Test suite for ErrorHandler"""

    @pytest.fixture
    def handler(self):
        return ErrorHandler()

    @pytest.mark.unit
    def test_logs_at_severity(self, handler, caplog):
        with caplog.at_level(logging.INFO, logger="clockvoice"):
            handler.handle_error(ConfigurationError("broken"), "Startup")

        assert caplog.records[-1].levelno == logging.ERROR
        assert caplog.records[-1].getMessage() == "Startup: broken"

    @pytest.mark.unit
    @pytest.mark.parametrize("error,level", [
        (ClockVoiceError("x", ErrorSeverity.LOW), logging.INFO),
        (ClockVoiceError("x", ErrorSeverity.CRITICAL), logging.CRITICAL),
        (PermissionError("x"), logging.ERROR),
        (KeyError("x"), logging.WARNING),
    ])
    def test_severity_mapping(self, handler, caplog, error, level):
        with caplog.at_level(logging.DEBUG, logger="clockvoice"):
            handler.handle_error(error)
        assert caplog.records[-1].levelno == level

    @pytest.mark.unit
    def test_no_callback(self, handler):
        assert handler.handle_error(CaptureError("mic")) is False

    @pytest.mark.unit
    def test_callback_for_base_class(self, handler):
        received = []
        handler.register_error_callback(ClockVoiceError, received.append)

        error = CaptureError("mic")
        assert handler.handle_error(error) is True
        assert received == [error]

    @pytest.mark.unit
    def test_most_specific_callback_wins(self, handler):
        calls = []
        handler.register_error_callback(ClockVoiceError, lambda e: calls.append("base"))
        handler.register_error_callback(CaptureError, lambda e: calls.append("capture"))

        handler.handle_error(CaptureError("mic"))

        assert calls == ["capture"]

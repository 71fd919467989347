"""Unit tests for the exception hierarchy."""

import pytest

from safejson.core.exceptions import (
    ConfigurationError,
    EncodingError,
    ErrorCode,
    SafeJSONError,
    Severity,
)


@pytest.mark.unit
class TestSafeJSONError:
    """Test the base exception."""

    def test_accepts_enum_error_code(self) -> None:
        """Test an ErrorCode member is stored as its string value."""
        error = SafeJSONError(ErrorCode.ENCODING_ERROR, "boom")

        assert error.error_code == "ENCODING_ERROR"
        assert error.message == "boom"
        assert error.severity is Severity.MEDIUM
        assert error.context == {}
        assert error.cause is None

    def test_accepts_string_error_code(self) -> None:
        """Test custom string error codes are kept as given."""
        error = SafeJSONError("CUSTOM", "boom")

        assert error.error_code == "CUSTOM"

    def test_str_and_repr(self) -> None:
        """Test the string forms include code, message and context."""
        error = SafeJSONError(
            ErrorCode.ENCODING_ERROR, "boom", Severity.LOW, context={"k": "v"}
        )

        assert str(error) == "[ENCODING_ERROR] boom"
        assert repr(error) == (
            "SafeJSONError(error_code='ENCODING_ERROR', message='boom', "
            "severity=LOW, context={'k': 'v'})"
        )

    def test_cause_is_chained(self) -> None:
        """Test the cause becomes the exception's __cause__."""
        cause = ValueError("inner")

        error = SafeJSONError(ErrorCode.ENCODING_ERROR, "outer", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    @pytest.mark.parametrize(
        ("severity", "is_expected", "should_alert"),
        [
            (Severity.LOW, True, False),
            (Severity.MEDIUM, True, False),
            (Severity.HIGH, False, True),
            (Severity.CRITICAL, False, True),
        ],
    )
    def test_severity_properties(
        self, severity: Severity, is_expected: bool, should_alert: bool
    ) -> None:
        """Test expected/alert classification follows severity."""
        error = SafeJSONError(ErrorCode.ENCODING_ERROR, "boom", severity)

        assert error.is_expected is is_expected
        assert error.should_alert is should_alert


@pytest.mark.unit
class TestSpecializedErrors:
    """Test EncodingError and ConfigurationError."""

    def test_encoding_error_records_path(self) -> None:
        """Test the JSON path is exposed and copied into the context."""
        context = {"expected": "integer"}

        error = EncodingError("bad value", path="$.a[0]", context=context)

        assert error.error_code == "ENCODING_ERROR"
        assert error.severity is Severity.MEDIUM
        assert error.path == "$.a[0]"
        assert error.context == {"expected": "integer", "path": "$.a[0]"}
        assert context == {"expected": "integer"}

    def test_encoding_error_without_path(self) -> None:
        """Test the path is optional."""
        error = EncodingError("bad value")

        assert error.path is None
        assert "path" not in error.context

    def test_configuration_error_alerts(self) -> None:
        """Test configuration errors are high severity."""
        error = ConfigurationError("bad config", context={"option": "encoding"})

        assert error.error_code == "CONFIGURATION_ERROR"
        assert error.severity is Severity.HIGH
        assert error.should_alert
        assert isinstance(error, SafeJSONError)

"""Unit tests for the security header set."""

import pytest
from starlette.datastructures import MutableHeaders

from safejson.api.security_headers import SecurityHeaderSet


@pytest.mark.unit
class TestSecurityHeaderSet:
    """Test header table normalization and application."""

    def test_default_headers(self) -> None:
        """Test the default table enables seven headers."""
        headers = SecurityHeaderSet().enabled_headers()

        assert headers == {
            "content-security-policy": "default-src 'none'",
            "strict-transport-security": "max-age=631138519",
            "x-content-type-options": "nosniff",
            "x-frame-options": "DENY",
            "x-permitted-cross-domain-policies": "none",
            "x-xss-protection": "1; mode=block",
            "referrer-policy": "no-referrer",
        }

    def test_disabled_entries_are_not_counted(self) -> None:
        """Test None entries are kept in the table but not emitted."""
        header_set = SecurityHeaderSet()

        assert header_set.table["x-download-options"] is None
        assert len(header_set) == 7

    def test_names_are_normalized(self) -> None:
        """Test names are lowercased and underscores become dashes."""
        header_set = SecurityHeaderSet({"X_Frame_Options": "SAMEORIGIN"})

        assert header_set.table == {"x-frame-options": "SAMEORIGIN"}

    def test_apply_overwrites_existing_values(self) -> None:
        """Test enabled headers replace values already on the response."""
        headers = MutableHeaders()
        headers["X-Frame-Options"] = "SAMEORIGIN"

        SecurityHeaderSet({"x-frame-options": "DENY"}).apply(headers)

        assert headers["x-frame-options"] == "DENY"
        assert headers.getlist("x-frame-options") == ["DENY"]

    def test_apply_leaves_disabled_headers_alone(self) -> None:
        """Test a disabled entry neither sets nor removes the header."""
        headers = MutableHeaders()
        headers["x-download-options"] = "noopen"

        SecurityHeaderSet({"x-download-options": None}).apply(headers)

        assert headers["x-download-options"] == "noopen"

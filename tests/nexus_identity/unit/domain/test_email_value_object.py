"""Unit tests for the Email value object."""

import pytest

from nexus_identity.domain.user import Email, InvalidEmailError


class TestEmail:
    def test_normalizes_case_and_whitespace(self):
        """Test that addresses are trimmed and lower-cased."""
        assert Email("  Alice@Example.COM ").value == "alice@example.com"

    def test_equal_after_normalization(self):
        assert Email("USER@example.com") == Email("user@example.com")

    @pytest.mark.parametrize("raw", ["", "no-at-sign", "user@", "@example.com", "user@host"])
    def test_invalid_addresses_rejected(self, raw):
        with pytest.raises(InvalidEmailError):
            Email(raw)

    def test_normalize_accepts_value_object(self):
        email = Email("x@example.com")

        assert Email.normalize(email) == "x@example.com"
        assert Email.normalize("X@Example.com") == "x@example.com"

    def test_str(self):
        assert str(Email("x@example.com")) == "x@example.com"

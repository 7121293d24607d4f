import pytest

from champions.core.modules.user.validators import normalize_email, validate_password
from champions.errors import ValidationError


class TestValidatePassword:
    def test_valid(self):
        validate_password("secret1")

    def test_too_short(self):
        with pytest.raises(ValidationError, match="at least 6"):
            validate_password("abc")

    def test_whitespace(self):
        with pytest.raises(ValidationError, match="whitespace"):
            validate_password("has space")


class TestNormalizeEmail:
    def test_lowercased_and_trimmed(self):
        assert normalize_email("  Lead@Clinic.ORG ") == "lead@clinic.org"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "a@b", "two@@signs.com", "spa ce@x.com"])
    def test_invalid(self, email):
        with pytest.raises(ValidationError):
            normalize_email(email)

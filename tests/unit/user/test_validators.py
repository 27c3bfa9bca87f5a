"""Tests for user input validators."""

import pytest

from futuresqr.core.modules.user.validators import validate_login_name, validate_password
from futuresqr.errors import ValidationError


class TestValidatePassword:
    def test_valid_password(self):
        validate_password("admin")

    def test_too_short(self):
        with pytest.raises(ValidationError, match="at least 2 characters"):
            validate_password("a")

    def test_longest_password_accepted(self):
        validate_password("x" * 72)

    @pytest.mark.parametrize("password", ["x" * 73, "ü" * 37])
    def test_too_long_in_bytes(self, password):
        with pytest.raises(ValidationError, match="at most 72 bytes"):
            validate_password(password)

    def test_whitespace_rejected(self):
        with pytest.raises(ValidationError, match="whitespace"):
            validate_password("pass word")


class TestValidateLoginName:
    @pytest.mark.parametrize("login_name", ["admin", "r.breunung", "dev_1", "a-b"])
    def test_valid_login_names(self, login_name):
        validate_login_name(login_name)

    @pytest.mark.parametrize("login_name", ["", ".admin", "ad min", "admin!", "x" * 65])
    def test_invalid_login_names(self, login_name):
        with pytest.raises(ValidationError):
            validate_login_name(login_name)

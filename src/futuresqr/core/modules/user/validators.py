from futuresqr.errors import ValidationError
from futuresqr.utils import is_login_name

# bcrypt only hashes the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 2 characters
    - At most 72 bytes when UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 2:
        raise ValidationError("Password must be at least 2 characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")


def validate_login_name(login_name: str) -> None:
    """Login names start with a letter or digit and may contain ``.``, ``_`` and ``-``."""
    if not 1 <= len(login_name) <= 64:
        raise ValidationError("Login name must be between 1 and 64 characters long")

    if not is_login_name(login_name):
        raise ValidationError(f"Invalid login name: {login_name}")

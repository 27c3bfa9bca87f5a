import re
import secrets
from datetime import UTC, datetime

LOGIN_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def is_login_name(value: str) -> bool:
    return bool(LOGIN_NAME_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)


def new_opaque_token() -> str:
    """Unguessable URL-safe value for session ids and CSRF tokens."""
    return secrets.token_urlsafe(32)


def tokens_equal(presented: str, expected: str) -> bool:
    return secrets.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))

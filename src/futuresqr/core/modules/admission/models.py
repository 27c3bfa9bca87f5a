from pydantic import BaseModel

from futuresqr.core.modules.csrf.models import CsrfToken
from futuresqr.core.modules.user.models import Principal

# Methods admitted on a valid session alone, everything else needs the CSRF token as well
SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})


def is_safe_method(method: str) -> bool:
    return method.upper() in SAFE_METHODS


class IssuedToken(BaseModel):
    """Result of token issuance."""

    csrf_token: CsrfToken
    session_id: str
    session_created: bool


class AuthenticationResult(BaseModel):
    """Result of a successful login: the rotated session and its fresh token."""

    principal: Principal
    session_id: str
    csrf_token: CsrfToken

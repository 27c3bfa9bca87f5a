import structlog

from futuresqr.core.core import Service
from futuresqr.core.modules.admission.models import AuthenticationResult, IssuedToken, is_safe_method
from futuresqr.core.modules.user.models import Principal
from futuresqr.errors import (
    AccessDeniedError,
    AuthenticationError,
    AuthenticationRequiredError,
    BadCredentialsError,
    CsrfInvalidError,
    NoSessionError,
    NotFoundError,
)

logger = structlog.get_logger(__name__)


class AdmissionService(Service):
    """Per-request security decisions: token issuance, login, admission and logout.

    Session lifecycle: anonymous -> token issued -> authenticated -> invalidated.
    """

    async def issue_token(self, session_id: str | None) -> IssuedToken:
        """Issue a fresh CSRF token, creating an anonymous session when none is usable."""
        sessions = self.core.services.session
        session = await sessions.find_session(session_id)
        created = session is None
        if session is None:
            session = await sessions.create_session()
        csrf_token = await self.core.services.csrf.issue(session)
        return IssuedToken(csrf_token=csrf_token, session_id=session.session_id, session_created=created)

    async def authenticate(
        self, session_id: str | None, csrf_token: str | None, login_name: str, password: str
    ) -> AuthenticationResult:
        """Verify credentials and rotate session and CSRF token.

        Checks run in order and stop at the first failure: session, CSRF
        token, credentials. A CSRF failure leaves the token untouched, a
        credential failure rotates it.

        Raises:
            NoSessionError: If no live session was presented
            SessionExpiredError: If the session outlived its lifetime
            CsrfInvalidError: If the token is absent or not the session's current one
            BadCredentialsError: If login name and password do not match
        """
        sessions = self.core.services.session
        csrf = self.core.services.csrf
        try:
            session = await sessions.get_session(session_id)
            csrf.verify(session, csrf_token, missing_error=CsrfInvalidError)
        except AuthenticationError as e:
            logger.info("authentication_denied", reason=e.reason)
            raise

        try:
            user = await self.core.services.user.verify_credentials(login_name, password)
        except BadCredentialsError:
            rotated = await csrf.issue(session)
            logger.info("authentication_denied", reason=BadCredentialsError.reason)
            raise BadCredentialsError(rotated_token=rotated.token) from None

        # csrf.verify guarantees a token was presented
        new_session = await sessions.rotate(session, csrf_token or "", user.id)
        new_token = await csrf.issue(new_session)
        logger.info("authentication_succeeded", login_name=user.login_name)
        return AuthenticationResult(
            principal=Principal.from_user(user), session_id=new_session.session_id, csrf_token=new_token
        )

    async def admit(self, session_id: str | None, csrf_token: str | None, method: str) -> Principal:
        """Decide whether a request to a protected resource may proceed.

        Safe methods need a live authenticated session. State-changing methods
        additionally need the session's current CSRF token.

        Raises:
            NoSessionError: If no live session was presented
            SessionExpiredError: If the session outlived its lifetime
            CsrfMissingError: If a state-changing request carries no token
            CsrfInvalidError: If the token is not the session's current one
            AuthenticationRequiredError: If the session is anonymous
        """
        sessions = self.core.services.session
        session = await sessions.get_session(session_id)
        if not is_safe_method(method):
            self.core.services.csrf.verify(session, csrf_token)
        if session.user_id is None:
            raise AuthenticationRequiredError

        try:
            user = await self.core.services.user.get_user(session.user_id)
        except NotFoundError:
            # The user was deleted while logged in
            await sessions.invalidate(session.session_id)
            raise NoSessionError from None
        return Principal.from_user(user)

    async def logout(self, session_id: str | None, csrf_token: str | None) -> Principal:
        """End an authenticated session. Admitted like any state-changing request."""
        principal = await self.admit(session_id, csrf_token, "POST")
        # admit() succeeded, so the id is present
        await self.core.services.session.invalidate(session_id or "")
        logger.info("logged_out", login_name=principal.login_name)
        return principal

    def ensure_admin(self, principal: Principal) -> None:
        """Ensure the principal is admin, raise AccessDeniedError if not."""
        if not principal.is_admin:
            raise AccessDeniedError("Admin privileges required")

import structlog

from futuresqr.core.core import Service
from futuresqr.core.modules.csrf.models import CONFLICTING_TOKENS, CsrfToken
from futuresqr.core.modules.session.models import Session
from futuresqr.errors import AuthenticationError, CsrfInvalidError, CsrfMissingError
from futuresqr.utils import new_opaque_token, tokens_equal

logger = structlog.get_logger(__name__)


class CsrfService(Service):
    """CSRF token registry, one current token per session stored on the session itself."""

    async def issue(self, session: Session) -> CsrfToken:
        """Generate a token for ``session``, superseding the previous one."""
        value = new_opaque_token()
        await self.core.services.session.store_csrf_token(session, value)
        session.csrf_token = value
        config = self.core.config
        return CsrfToken(
            token=value,
            header_name=config.csrf_header_name,
            parameter_name=config.csrf_parameter_name,
            session_id=session.session_id,
        )

    def verify(
        self,
        session: Session,
        presented: str | None,
        missing_error: type[AuthenticationError] = CsrfMissingError,
    ) -> None:
        """Check that ``presented`` is the current token of ``session``.

        Raises:
            missing_error: If no token was presented
            CsrfInvalidError: If the token is stale, belongs to another session
                or the request carried conflicting tokens
        """
        if not presented:
            raise missing_error
        if presented == CONFLICTING_TOKENS:
            logger.info("csrf_token_rejected", authenticated=session.is_authenticated, conflicting=True)
            raise CsrfInvalidError
        if session.csrf_token is None or not tokens_equal(presented, session.csrf_token):
            logger.info("csrf_token_rejected", authenticated=session.is_authenticated)
            raise CsrfInvalidError

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from futuresqr.web.deps import PrincipalDep

router = APIRouter(prefix="/rest/test", tags=["demo"])


@router.api_route(
    "/post",
    methods=["GET", "POST"],
    summary="Echo message",
    description="Return the message parameter. POST requires the CSRF token, GET only the session.",
    operation_id="echoMessage",
    response_class=PlainTextResponse,
)
async def echo_message(principal: PrincipalDep, message: str = "") -> str:
    return message

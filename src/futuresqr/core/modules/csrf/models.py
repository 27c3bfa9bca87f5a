from pydantic import BaseModel, ConfigDict, Field

# Presented in place of a token when a request's channels disagree; never a valid token value
CONFLICTING_TOKENS = "<conflicting>"


class CsrfToken(BaseModel):
    """Anti-forgery token bound to one session."""

    token: str
    header_name: str
    parameter_name: str
    session_id: str


class CsrfView(BaseModel):
    """CSRF token as handed to clients, without the session it is bound to."""

    token: str = Field(..., description="Current token value")
    header_name: str = Field(..., alias="headerName", description="Header that may carry the token")
    parameter_name: str = Field(..., alias="parameterName", description="Query or form parameter that may carry the token")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_domain(cls, csrf_token: CsrfToken) -> "CsrfView":
        return cls(token=csrf_token.token, header_name=csrf_token.header_name, parameter_name=csrf_token.parameter_name)

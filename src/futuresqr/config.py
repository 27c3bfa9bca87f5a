from typing import Literal

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = "memory://"  # mongodb://host/db, or memory:// for the in-process store
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    cors_origins: list[str] = []
    session_ttl_seconds: int = 30 * 60
    session_cookie_name: str = "JSESSIONID"
    csrf_cookie_name: str = "XSRF-TOKEN"
    csrf_header_name: str = "X-XSRF-TOKEN"
    csrf_parameter_name: str = "_csrf"
    # What to answer when a request lacks the challenge entirely (no CSRF token, or anonymous session)
    missing_challenge_policy: Literal["redirect", "forbid"] = "redirect"
    login_url: str = "/login"
    secure_cookies: bool = False  # Set to True in production with HTTPS
    password_hash_rounds: int = 12  # bcrypt cost factor
    bootstrap_admin: bool = True
    admin_login_name: str = "admin"
    admin_password: str = "admin"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "FUTURESQR_",
        "extra": "ignore",
    }

    @property
    def uses_memory_storage(self) -> bool:
        return self.database_url.startswith("memory://")

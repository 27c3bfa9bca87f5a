"""Tests for the server entry point's uvicorn logging setup."""

from uvicorn.config import LOGGING_CONFIG

from futuresqr.config import Config
from futuresqr.main import ACCESS_LOG_FORMAT, uvicorn_log_config


def make_config(debug):
    return Config(_env_file=None, debug=debug)


def test_formats_applied_without_touching_uvicorn_defaults():
    default_access_format = LOGGING_CONFIG["formatters"]["access"]["fmt"]

    log_config = uvicorn_log_config(make_config(debug=False))

    assert log_config["formatters"]["access"]["fmt"] == ACCESS_LOG_FORMAT
    assert LOGGING_CONFIG["formatters"]["access"]["fmt"] == default_access_format


def test_level_follows_debug_flag():
    quiet = uvicorn_log_config(make_config(debug=False))
    verbose = uvicorn_log_config(make_config(debug=True))

    assert {logger["level"] for logger in quiet["loggers"].values()} == {"INFO"}
    assert {logger["level"] for logger in verbose["loggers"].values()} == {"DEBUG"}

"""FutureSQR server entry point: settings, logging and the uvicorn server."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from futuresqr.app import App
from futuresqr.config import Config
from futuresqr.logging import setup_logging
from futuresqr.web.server import create_fastapi_app

ACCESS_LOG_FORMAT = '%(asctime)s - "%(request_line)s" %(status_code)s'
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def uvicorn_log_config(config: Config) -> dict[str, Any]:
    """Uvicorn logging with compact formats, verbose in debug mode."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = ACCESS_LOG_FORMAT
    log_config["formatters"]["default"]["fmt"] = DEFAULT_LOG_FORMAT
    level = "DEBUG" if config.debug else "INFO"
    for logger_config in log_config["loggers"].values():
        logger_config["level"] = level
    return log_config


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    fastapi_app = create_fastapi_app(App(config), config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=uvicorn_log_config(config),
        access_log=True,
    )


if __name__ == "__main__":
    main()

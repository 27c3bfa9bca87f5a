from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from futuresqr.config import Config

logger = structlog.get_logger(__name__)


class Service:
    """Base class for services.

    ``database`` is None when the application runs on in-memory storage.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]] | None) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from futuresqr.core.modules.admission.service import AdmissionService  # noqa: PLC0415
    from futuresqr.core.modules.csrf.service import CsrfService  # noqa: PLC0415
    from futuresqr.core.modules.session.service import SessionService  # noqa: PLC0415
    from futuresqr.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    session: SessionService
    csrf: CsrfService
    admission: AdmissionService

    def __init__(self, database: AsyncDatabase[dict[str, Any]] | None) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters: the user store must be ready before the admin bootstrap
        service_configs = [
            ("user", "futuresqr.core.modules.user.service", "UserService"),
            ("session", "futuresqr.core.modules.session.service", "SessionService"),
            ("csrf", "futuresqr.core.modules.csrf.service", "CsrfService"),
            ("admission", "futuresqr.core.modules.admission.service", "AdmissionService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, storage, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    database: AsyncDatabase[dict[str, Any]] | None
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, storage backend, and auto-register services."""
        self.config = config
        if config.uses_memory_storage:
            self.mongo_client = None
            self.database = None
        else:
            self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
            self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        logger.info("core_starting", storage="memory" if self.database is None else "mongodb")
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()

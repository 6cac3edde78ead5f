"""Fixtures for API integration tests.

The app runs inside TestClient's event loop, so tables are created with a
synchronous engine and async seeding goes through client.portal.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from api.dependencies.rate_limits import setup_rate_limiter
from api.router import api_router
from infrastructure.notifications import NotificationService
from infrastructure.notifications.channels import (
    ConnectionRegistry,
    InAppChannel,
    WebSocketChannel,
)
from infrastructure.persistence import Base, Database
from infrastructure.persistence import models  # noqa: F401
from infrastructure.services import (
    get_connection_registry,
    get_notification_service,
    get_settings,
)

USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "api.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def api_settings(settings_factory):
    return settings_factory()


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def api_database(db_path):
    return Database(f"sqlite+aiosqlite:///{db_path}")


@pytest.fixture
def service(api_database, api_settings, registry):
    return NotificationService(
        settings=api_settings,
        database=api_database,
        registry=registry,
        senders=[InAppChannel(), WebSocketChannel(registry)],
    )


@pytest.fixture
def app(service, api_settings, registry):
    app = FastAPI()
    setup_rate_limiter(app)
    app.include_router(api_router)
    app.dependency_overrides[get_settings] = lambda: api_settings
    app.dependency_overrides[get_notification_service] = lambda: service
    app.dependency_overrides[get_connection_registry] = lambda: registry
    return app


@pytest.fixture
def client(app, api_database):
    with TestClient(app) as client:
        yield client
        client.portal.call(api_database.dispose)

"""Integration tests for application startup and shutdown."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from server import lifespan as lifespan_module


@pytest.mark.integration
class TestLifespan:
    @pytest.mark.asyncio
    async def test_startup_and_shutdown(self, settings_factory):
        settings = settings_factory(database={"DATABASE_CREATE_TABLES": True})
        database = MagicMock()
        database.create_all = AsyncMock()
        database.dispose = AsyncMock()
        service = MagicMock()
        service.aclose = AsyncMock()
        service.dispatcher.senders = {"in_app": MagicMock()}
        app = FastAPI()

        with patch.object(lifespan_module, "get_settings", return_value=settings), patch.object(
            lifespan_module, "get_database", return_value=database
        ), patch.object(
            lifespan_module, "get_notification_service", return_value=service
        ):
            async with lifespan_module.lifespan(app):
                database.create_all.assert_awaited_once()
                assert app.state.notification_service is service
                assert app.state.settings is settings

        service.aclose.assert_awaited_once()
        database.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_tables_not_created_by_default(self, settings):
        database = MagicMock()
        database.create_all = AsyncMock()
        database.dispose = AsyncMock()
        service = MagicMock()
        service.aclose = AsyncMock()
        app = FastAPI()

        with patch.object(lifespan_module, "get_settings", return_value=settings), patch.object(
            lifespan_module, "get_database", return_value=database
        ), patch.object(
            lifespan_module, "get_notification_service", return_value=service
        ):
            async with lifespan_module.lifespan(app):
                pass

        database.create_all.assert_not_awaited()

"""
CatVote Backend: Configuration, Store and Startup Tests
=======================================================

What we test:
    ✅ Settings defaults, env names and validation
    ✅ Store enforces foreign keys and creates tables idempotently
    ✅ Startup survives an unopenable store
    ✅ Sentry is initialised only when a DSN is configured
"""

import logging
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import text

from catvote.config import Settings, settings
from catvote.database import Store
from catvote.main import create_app, setup_error_reporting
from catvote.middleware.logging import access_log_level
from catvote.middleware.request_id import resolve_request_id


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "DATABASE_PATH", "API_URL", "EXPO_PUBLIC_API_URL", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.port == 3000
        assert config.database_path == "./database.db"
        assert config.api_url == "http://localhost:3000"
        assert config.cat_api_limit == 10
        assert config.log_level == "INFO"

    def test_database_url_uses_aiosqlite(self):
        config = Settings(_env_file=None, database_path="/tmp/cats.db")
        assert config.database_url == "sqlite+aiosqlite:////tmp/cats.db"

    def test_expo_public_api_url_is_accepted(self, monkeypatch):
        monkeypatch.delenv("API_URL", raising=False)
        monkeypatch.setenv("EXPO_PUBLIC_API_URL", "http://10.0.2.2:3000")

        assert Settings(_env_file=None).api_url == "http://10.0.2.2:3000"

    def test_cors_origins_list(self):
        config = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_log_level_is_normalised(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_invalid_port_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, port=70000)


class TestStore:

    @pytest.mark.asyncio
    async def test_foreign_keys_enabled(self, db_session):
        result = await db_session.execute(text("PRAGMA foreign_keys"))
        assert result.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_create_tables_is_idempotent(self, store, db_session):
        await store.create_tables()

        result = await db_session.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
        )
        assert {"cats", "votes", "monthly_winners"} <= set(result.scalars().all())

    @pytest.mark.asyncio
    async def test_session_scope_rolls_back_on_error(self, store):
        with pytest.raises(RuntimeError):
            async with store.session() as db:
                await db.execute(text("INSERT INTO cats (image_url) VALUES ('https://img/x.jpg')"))
                raise RuntimeError("abort")

        async with store.session() as db:
            result = await db.execute(text("SELECT COUNT(*) FROM cats"))
            assert result.scalar_one() == 0


class TestStartup:

    @pytest.mark.asyncio
    async def test_unopenable_store_does_not_stop_startup(self, tmp_path):
        store = Store(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'cats.db'}")
        app = create_app(store)

        with patch("catvote.main.setup_logging"):
            async with app.router.lifespan_context(app):
                transport = ASGITransport(app=app)
                async with AsyncClient(transport=transport, base_url="http://test") as client:
                    health = await client.get("/api/health")
                    cats = await client.get("/api/cats")

        assert health.status_code == 200
        assert health.json() == {"status": "ok"}
        assert cats.status_code == 500
        assert cats.json()["error"] == "server_error"

    @pytest.mark.asyncio
    async def test_startup_creates_tables(self, tmp_path):
        store = Store(f"sqlite+aiosqlite:///{tmp_path / 'cats.db'}")
        app = create_app(store)

        with patch("catvote.main.setup_logging"):
            async with app.router.lifespan_context(app):
                async with store.session() as db:
                    result = await db.execute(text("SELECT COUNT(*) FROM cats"))
                    assert result.scalar_one() == 0


class TestErrorReporting:

    def test_disabled_without_dsn(self):
        with patch.object(settings, "sentry_dsn", ""), \
             patch("catvote.main.sentry_sdk") as mock_sentry:
            assert setup_error_reporting() is False
        mock_sentry.init.assert_not_called()

    def test_enabled_with_dsn(self):
        dsn = "https://public@sentry.example.com/1"
        with patch.object(settings, "sentry_dsn", dsn), \
             patch("catvote.main.sentry_sdk") as mock_sentry:
            assert setup_error_reporting() is True
        mock_sentry.init.assert_called_once()
        assert mock_sentry.init.call_args.kwargs["dsn"] == dsn


class TestMiddlewareHelpers:

    @pytest.mark.parametrize("status,duration_ms,expected", [
        (200, 12.0, logging.INFO),
        (200, 5000.0, logging.WARNING),
        (404, 3.0, logging.WARNING),
        (500, 3.0, logging.ERROR),
    ])
    def test_access_log_level(self, status, duration_ms, expected):
        assert access_log_level(status, duration_ms) == expected

    def test_well_formed_client_id_is_kept(self):
        assert resolve_request_id("mobile-7f3a") == "mobile-7f3a"

    @pytest.mark.parametrize("header_value", ["", "has spaces", "x" * 65, "bad\nline"])
    def test_malformed_client_id_is_replaced(self, header_value):
        rid = resolve_request_id(header_value)
        assert rid != header_value
        assert len(rid) == 8

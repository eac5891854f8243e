"""Integration tests for application lifecycle and startup behavior."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from src.catalog.api.http.app import create_app, shutdown, startup
from src.catalog.core.services import DbSessionService
from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import with_context


def _fail_fast_config(enabled: bool) -> ConfigData:
    config = ConfigData()
    config.database.fail_on_startup_error = enabled
    return config


class TestApplicationStartup:
    """Test application startup and the database failure policy."""

    async def test_startup_creates_schema(self, empty_engine):
        app = create_app(database_service=DbSessionService(engine=empty_engine))

        await startup(app)

        assert "products" in inspect(empty_engine).get_table_names()
        report = app.state.app_dependencies.startup_report
        assert report.ok
        assert report.tables == ["products"]

    async def test_startup_continues_when_database_unreachable(self, unreachable_engine):
        app = create_app(database_service=DbSessionService(engine=unreachable_engine))

        with with_context(_fail_fast_config(False)):
            await startup(app)

        report = app.state.app_dependencies.startup_report
        assert not report.connected
        assert report.error is not None

    async def test_startup_fails_fast_when_configured(self, unreachable_engine):
        app = create_app(database_service=DbSessionService(engine=unreachable_engine))

        with pytest.raises(Exception, match="unable to open database file"):
            with with_context(_fail_fast_config(True)):
                await startup(app)

    async def test_shutdown_without_startup(self, empty_engine):
        app = create_app(database_service=DbSessionService(engine=empty_engine))

        await shutdown(app)


class TestHealthEndpoints:
    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "catalog-api"}

    def test_readiness_with_database(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["database"] == {"status": "healthy", "type": "sqlite"}

    def test_database_health_reports_pool(self, client):
        response = client.get("/health/database")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["pool"]["pool_class"] == "StaticPool"

    def test_degraded_app_keeps_serving_liveness(self, unreachable_engine):
        """With the default policy an unreachable database leaves the app up."""
        app = create_app(database_service=DbSessionService(engine=unreachable_engine))

        with TestClient(app) as client:
            assert client.get("/health").status_code == 200

            response = client.get("/health/ready")
            assert response.status_code == 503
            body = response.json()
            assert body["status"] == "not_ready"
            assert "startup_error" in body["checks"]["database"]


class TestDocs:
    def test_root_banner(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/swagger"

    def test_openapi_schema_lists_product_routes(self, client):
        response = client.get("/swagger/v1/swagger.json")

        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/api/products" in paths
        assert "/api/products/{product_id}" in paths

    def test_docs_can_be_disabled(self, empty_engine):
        config = ConfigData()
        config.app.docs_enabled = False

        with with_context(config):
            app = create_app(database_service=DbSessionService(engine=empty_engine))

        assert app.docs_url is None
        assert app.openapi_url is None

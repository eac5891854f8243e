"""Schema management and startup diagnostics for the catalog database."""

import time
from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy import Engine, inspect, text
from sqlmodel import SQLModel

from src.catalog.runtime.context import get_config
from src.catalog.runtime.settings import EnvironmentVariables
from src.catalog.utils.database_url import describe_database_url, redact_database_url


@dataclass
class StartupReport:
    """Outcome of the startup database checks."""

    source: str
    target: str
    connected: bool = False
    latency_ms: float | None = None
    schema_ready: bool = False
    tables: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.connected and self.schema_ready and self.error is None


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def ensure_schema(self) -> list[str]:
        """Create any missing tables and return the table names now present."""
        from src.catalog.entities.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        tables = sorted(inspect(self._engine).get_table_names())
        logger.info("Database schema ensured; tables: {}", tables)
        return tables

    def probe(self) -> float:
        """Run ``SELECT 1`` and return the round-trip time in milliseconds."""
        start = time.perf_counter()
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return round((time.perf_counter() - start) * 1000, 1)

    def run_startup_checks(
        self, fail_fast: bool | None = None, ensure_schema: bool | None = None
    ) -> StartupReport:
        """Log where the database is, check it answers and prepare the schema.

        With ``fail_fast`` the first error is re-raised; otherwise it is logged
        and recorded in the report so the process can keep running degraded.
        Both flags default to the ``database`` section of the active config.
        """
        db_config = get_config().database
        if fail_fast is None:
            fail_fast = db_config.fail_on_startup_error
        if ensure_schema is None:
            ensure_schema = db_config.ensure_schema

        url = self._engine.url.render_as_string(hide_password=False)
        report = StartupReport(
            source=EnvironmentVariables().database_url_source,
            target=redact_database_url(url),
        )

        logger.info("Database connection string taken from {}", report.source)
        try:
            details = describe_database_url(url)
            logger.bind(**details).info("Database target: {}", report.target)

            report.latency_ms = self.probe()
            report.connected = True
            logger.info("Database reachable ({} ms)", report.latency_ms)

            if ensure_schema:
                logger.info("Ensuring database schema...")
                report.tables = self.ensure_schema()
            report.schema_ready = True
        except Exception as e:
            report.error = f"{type(e).__name__}: {e}"
            logger.opt(exception=e).error(
                "Database startup check failed: {}", report.error
            )
            if fail_fast:
                raise
            logger.warning("Continuing without a working database")

        return report

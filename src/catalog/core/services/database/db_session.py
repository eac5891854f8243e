"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, StaticPool, text
from sqlalchemy.engine import make_url
from sqlmodel import Session, create_engine

from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import get_config


class DbSessionService:
    def __init__(self, engine: Engine | None = None):
        """Initialize the shared database engine and session factory.

        An explicit ``engine`` bypasses the configuration; tests use this to
        run against in-memory SQLite.
        """
        if engine is not None:
            self._engine = engine
            return

        logger.info("Setting up database engine and session factory")
        main_config = get_config()
        db_config = main_config.database

        engine_kwargs = self._get_engine_kwargs(main_config)
        logger.info(
            "Initializing {} database engine for {}",
            db_config.backend,
            db_config.redacted_url,
        )
        self._engine = create_engine(db_config.connection_string, **engine_kwargs)

        if main_config.app.environment == "production":
            logger.bind(
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
            ).info("Database engine initialized")

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def backend(self) -> str:
        return self._engine.dialect.name

    def _get_engine_kwargs(self, config: ConfigData) -> dict[str, Any]:
        """Engine options for the configured backend."""
        db_config = config.database
        engine_kwargs: dict[str, Any] = {
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(config),
        }

        if db_config.backend == "postgresql":
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,  # Validate connections before use
                }
            )
        elif db_config.backend == "sqlite":
            database = make_url(db_config.connection_string).database
            if database in (None, "", ":memory:"):
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool

        return engine_kwargs

    def _get_connect_args(self, config: ConfigData) -> dict[str, Any]:
        """Get database-specific connection arguments."""
        connect_args: dict[str, Any] = {}

        if config.database.backend == "postgresql":
            connect_args.update(
                {
                    # Application name for connection tracking
                    "application_name": f"{config.app.name}_{config.app.environment}",
                    "connect_timeout": config.database.connect_timeout,
                }
            )

        elif config.database.backend == "sqlite":
            connect_args["check_same_thread"] = False

            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for repositories and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database transaction failed")
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database health check failed")
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool

        def _stat(name: str) -> int:
            value = getattr(pool, name, None)
            return value() if callable(value) else 0

        return {
            "pool_class": type(pool).__name__,
            "size": _stat("size"),
            "checked_in": _stat("checkedin"),
            "checked_out": _stat("checkedout"),
            "overflow": _stat("overflow"),
        }

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()

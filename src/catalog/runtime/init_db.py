"""Database initialization script."""

from loguru import logger

from src.catalog.core.services import DbManageService, DbSessionService


def init_db() -> list[str]:
    """Create all database tables and return the table names."""
    database_service = DbSessionService()
    try:
        return DbManageService(database_service.engine).ensure_schema()
    finally:
        database_service.dispose()


def main() -> None:
    """Console-script entry point; exit status 0 on success."""
    tables = init_db()
    logger.info("Database initialized with tables: {}", ", ".join(tables))


if __name__ == "__main__":
    main()

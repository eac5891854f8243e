"""FastAPI dependencies for the HTTP layer."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.services import DbSessionService
from src.catalog.entities.product import ProductRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> DbSessionService:
    """Get the database service instance."""
    return app_deps.database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a request-scoped session, rolled back on error and always closed.

    Handlers commit explicitly once their writes succeed.
    """
    session = database_service.get_session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_product_repository(
    session: Session = Depends(get_db_session),
) -> ProductRepository:
    return ProductRepository(session)

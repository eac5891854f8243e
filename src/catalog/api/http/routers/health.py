"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.api.http.deps import get_app_dependencies
from src.catalog.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    This is a liveness probe that returns 200 OK as long as the application
    process is running. It does not check dependencies.
    """
    return {"status": "healthy", "service": get_config().app.name}


@router.get("/ready", response_model=None)
def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Readiness check - returns 503 while the database is unreachable."""
    config = get_config()

    try:
        db_healthy = app_deps.database_service.health_check()
        database = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": app_deps.database_service.backend,
        }
    except Exception as e:
        db_healthy = False
        database = {"status": "unhealthy", "error": str(e)}

    report = app_deps.startup_report
    if report is not None and report.error:
        database["startup_error"] = report.error

    response = {
        "status": "ready" if db_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": {"database": database},
    }

    if not db_healthy:
        return JSONResponse(status_code=503, content=response)

    return response


@router.get("/database", response_model=None)
def health_database(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Database-specific health check with connection pool status."""
    try:
        healthy = app_deps.database_service.health_check()
        pool_status = app_deps.database_service.get_pool_status()

        return {
            "status": "healthy" if healthy else "unhealthy",
            "type": app_deps.database_service.backend,
            "pool": pool_status,
        }
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )

"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.catalog import __version__
from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.api.http.routers import health, product
from src.catalog.api.utils.app_startup import configure_logging
from src.catalog.core.services import DbManageService, DbSessionService
from src.catalog.runtime.context import get_config

REQUEST_ID_HEADER = "X-Request-ID"

# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault(REQUEST_ID_HEADER, request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={REQUEST_ID_HEADER: request_id},
            )


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info(
        "Starting {} v{} in {} environment",
        config.app.name,
        __version__,
        config.app.environment,
    )

    database_service: DbSessionService | None = getattr(
        app.state, "database_service", None
    )
    if database_service is None:
        database_service = DbSessionService()
        app.state.database_service = database_service

    # Raises when database.fail_on_startup_error is set
    report = DbManageService(database_service.engine).run_startup_checks()

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        startup_report=report,
    )
    logger.info("Application listening on {}", config.app.base_url)


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


def create_app(database_service: DbSessionService | None = None) -> FastAPI:
    """Build the FastAPI application.

    ``database_service`` replaces the configured database, mainly for tests.
    """
    config = get_config()
    docs_enabled = config.app.docs_enabled

    app = FastAPI(
        title="Product Catalog API",
        version=__version__,
        description="CRUD API over the product catalog",
        lifespan=lifespan,
        docs_url="/swagger" if docs_enabled else None,
        openapi_url="/swagger/v1/swagger.json" if docs_enabled else None,
        redoc_url=None,
    )
    if database_service is not None:
        app.state.database_service = database_service

    app.add_middleware(SecurityHeadersMiddleware)

    # --- CORS configuration ---
    cors = config.app.cors
    if config.app.environment == "production" and "*" in cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_origin_regex=cors.origin_regex,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    # Registered last so it wraps everything and sees every response
    app.middleware("http")(log_requests)

    # --- Router registration ---
    app.include_router(health.router)
    app.include_router(product.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str | None]:
        return {
            "service": config.app.name,
            "version": __version__,
            "docs": app.docs_url,
        }

    return app


app = create_app()

# expose lifecycle hooks for tests
__all__ = ["app", "create_app", "startup", "shutdown"]


if __name__ == "__main__":
    import uvicorn

    main_config = get_config()
    uvicorn.run(
        app,
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,  # We handle access logging in middleware
    )

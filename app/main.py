"""
Main FastAPI application entry point
"""

import logging
import os
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse, RedirectResponse
from scalar_fastapi import get_scalar_api_reference  # type: ignore[import-untyped]
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import check_db_health, init_db
from app.core.route_guard import RouteAction, decide_route, is_api_route, should_guard
from app.core.security import check_api_key, read_owner_id

logger = logging.getLogger("uvicorn.error")

__num_of_api_keys__ = len(settings.api_keys)
logger.info(f"Total API keys: {__num_of_api_keys__}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    # Startup
    logger.info("Starting Cloud Drive API Server...")
    # Skip init_db if SKIP_DB_INIT is set (for multi-worker deployments where
    # `python -m app.core.migrate` is run separately before starting workers)
    if not os.getenv("SKIP_DB_INIT"):
        await init_db()
        logger.info("Database initialized")
    else:
        logger.info("Skipping database initialization (SKIP_DB_INIT is set)")
    yield
    # Shutdown
    logger.info("Shutting down Cloud Drive API Server...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan,
)


# Configure OpenAPI security schemes
def custom_openapi_for_owner_auth():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "OwnerIdHeader": {
            "type": "apiKey",
            "in": "header",
            "name": settings.OWNER_ID_HEADER,
            "description": "Subject id of the signed-in user, forwarded by the identity provider.",
        },
        "APIKeyHeader": {
            "type": "apiKey",
            "in": "header",
            "name": "x-api-key",
            "description": "API Key in x-api-key header (only when API keys are configured).",
        },
    }
    openapi_schema["security"] = [{"OwnerIdHeader": [], "APIKeyHeader": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi_for_owner_auth

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def route_guard(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """
    Redirect signed-in users away from sign-in/sign-up, and keep anonymous callers
    out of protected routes. API routes additionally require a valid API key when
    keys are configured.
    """
    __func__ = "route_guard"
    path = request.url.path

    # CORS preflight carries no credentials
    if request.method == "OPTIONS":
        return await call_next(request)

    decision = decide_route(read_owner_id(request) is not None, path)

    if decision.action == RouteAction.REDIRECT:
        return RedirectResponse(url=decision.location or "/", status_code=307)

    if decision.action == RouteAction.DENY:
        logger.warning(f"[{__name__}:{__func__}] Access denied: not authenticated ({path})")
        return JSONResponse(status_code=401, content={"detail": "Not authenticated"})

    if is_api_route(path) and should_guard(path):
        accepted, reason = check_api_key(request)
        if not accepted:
            logger.warning(f"[{__name__}:{__func__}] Access denied: {reason}")
            return JSONResponse(status_code=401, content={"detail": f"Access denied ({reason})"})

    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Uniform body for routes that do not exist; every other HTTP error keeps the default shape
    """
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={"detail": "Page not found", "home": "/"},
        )
    return await http_exception_handler(request, exc)


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - health check"""
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check endpoint"""
    database_ok = await check_db_health()
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": "healthy" if database_ok else "degraded",
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "database": "connected" if database_ok else "unavailable",
        },
    )


@app.get("/api/latest/docs", include_in_schema=False)
async def scalar_html():
    return get_scalar_api_reference(
        openapi_url=app.openapi_url,
        title=app.title,
    )


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn

    #
    # Use '$ python -m app.main' on the root directory of the project for development
    # Use '$ uvicorn app.main:app --host 0.0.0.0 --port 33001' for production deployment
    #
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level="debug",
    )

import os
import sys
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.logging_config import logger

# Routers
from routers import all_routers


def error_body(detail) -> dict:
    """HTTPException detail → {"error": ..., "details"?: ...}"""
    if isinstance(detail, dict) and "error" in detail:
        return detail
    return {"error": detail}


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="MAKAO API: landlords, tenants, leases, payments and maintenance on Supabase + Clerk",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
        validate_config_on_startup()
        for route in app.routes:
            path = getattr(route, "path", None)
            if path:
                methods = ",".join(sorted(getattr(route, "methods", None) or []))
                logger.debug(f"{methods:10s} {path}")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403):
            logger.warning(f"HTTP {exc.status_code} at {request.url.path} — {exc.detail}")
        elif exc.status_code >= 500:
            logger.error(f"HTTP {exc.status_code} at {request.url.path} — {exc.detail}")

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    for router in all_routers:
        app.include_router(router)

    return app


# Create the global FastAPI instance
app = create_app()

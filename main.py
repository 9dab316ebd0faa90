"""Main entrypoint and application factory for the Budgetbook API.

This module initializes the FastAPI application, configures logging, creates the document tables, maps service
failures to HTTP responses, and exposes the Scalar API reference endpoint for interactive OpenAPI documentation. It
also includes the main entrypoint for running the app with Uvicorn.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference

from budgetbook import __version__
from budgetbook.api.routes import router
from budgetbook.core.db import engine, init_db
from budgetbook.core.errors import MemberNotFoundError, OwnerRoleError, PlanLimitError, StorageError
from budgetbook.core.settings import get_settings
from budgetbook.core.utils import ensure_dir, get_logger


# --- Logging Setup ---
def setup_logging() -> None:
    """Configure console and file logging on the application logger."""
    settings = get_settings()
    logger = get_logger("budgetbook")
    logger.setLevel(settings.log_level)
    # Add file handler for persistent logs (not colorized)
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        ensure_dir(Path(settings.log_file).parent)
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(file_handler)
    logger.propagate = False


setup_logging()
logger = get_logger("budgetbook.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler that creates the document tables."""
    _ = app  # Silence unused argument warning
    init_db(engine)
    logger.info("Document tables ready")
    yield


app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="Budgetbook API",
    description="""
    The Budgetbook API records income and expenses in shared workspaces and reports monthly summaries.

    Requests are authenticated by the identity provider in front of the API, which forwards the caller as
    `X-User-Id` (plus optional `X-User-Email` and `X-User-Name`). A first request creates the user's profile and a
    personal workspace seeded with the default categories.

    **Endpoints:**
    - `/workspaces`: workspaces and their members (roles owner, admin, member, viewer).
    - `/workspaces/{workspace_id}/categories`: category catalog.
    - `/workspaces/{workspace_id}/transactions`: transactions with filtering, search and CSV export.
    - `/workspaces/{workspace_id}/summary`: monthly summary and category breakdowns.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
    version=__version__,
)
app.include_router(router)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Report a failed store access as 503 so clients keep their last known good data."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})


@app.exception_handler(PlanLimitError)
async def plan_limit_handler(request: Request, exc: PlanLimitError) -> JSONResponse:
    """Report a plan quota violation as 403."""
    _ = request
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(OwnerRoleError)
async def owner_role_handler(request: Request, exc: OwnerRoleError) -> JSONResponse:
    """Report an attempt to change the owner's role as 400."""
    _ = request
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(MemberNotFoundError)
async def member_not_found_handler(request: Request, exc: MemberNotFoundError) -> JSONResponse:
    """Report an unknown invitee as 404."""
    _ = request
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.get("/scalar", include_in_schema=False)
async def scalar_docs() -> JSONResponse:
    """Return Scalar API reference."""
    return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)

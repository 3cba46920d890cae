"""
FastAPI application for the social OAuth relay.

This module wires dependencies and configures the application.
Business logic is in relay/core and the feature packages.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from relay.logging_config import setup_global_logging

setup_global_logging()

from dotenv import load_dotenv  # noqa: E402

load_dotenv()

from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from fastapi.staticfiles import StaticFiles  # noqa: E402
from starlette.middleware.sessions import SessionMiddleware  # noqa: E402

from relay.config import get_config  # noqa: E402
from relay.core.exceptions import RelayError  # noqa: E402
from relay.oauth import router as oauth_router  # noqa: E402
from relay.publishing import router as publishing_router  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log which platforms can be authorized when the app starts."""
    configured = [p.value for p in config.get_configured_platforms()]
    logger.info(
        "Application starting up...", extra={"configured_platforms": configured}
    )
    yield
    logger.info("Shutting down application...")


config = get_config()
config.validate()

app = FastAPI(
    title="Social OAuth Relay",
    description="Session-backed OAuth2 relay for publishing to Twitter and LinkedIn",
    version="1.0.0",
    lifespan=lifespan,
)

# Session cookie carries only the opaque session id; tokens stay server-side
app.add_middleware(
    SessionMiddleware,
    secret_key=config.session_secret,
    max_age=config.session_max_age,
    same_site="lax",
    https_only=config.is_production,
)

# Added last so it wraps the session middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    """
    Handle relay errors that escaped the routers.

    Scoped to the single request; never fatal to the process.
    """
    logger.error(f"Unhandled relay error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Request failed"},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Reject request bodies that fail PublishRequest validation.

    Returns 422 Unprocessable Entity with the validation details.
    """
    logger.warning(f"Validation error on {request.url.path}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Invalid request payload",
            "details": exc.errors(),
        },
    )


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "social-relay",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(oauth_router.router)
app.include_router(publishing_router.router)

# Static assets (including the callback landing page) are served last
if os.path.isdir(config.static_dir):
    app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")
else:
    logger.info(f"Static directory '{config.static_dir}' not found, not serving files")


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 3000))
    uvicorn.run(app, host="0.0.0.0", port=port, proxy_headers=True)

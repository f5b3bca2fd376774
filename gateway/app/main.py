"""
FastAPI Auth Gateway Application Factory
=========================================

Entry point for the authentication gateway that sits between a browser
client and an OpenID Connect identity provider.

Architecture:
    Browser → Gateway (this service) → Identity Provider / Resource API

Routers:
    - /auth/*       : Consent URL, code exchange, login status, logout
    - /user/*       : Protected resources (requires the session cookie)
    - /health       : Health check endpoint

Environment Variables Required:
    - GOOGLE_CLIENT_ID: OAuth client ID
    - GOOGLE_CLIENT_SECRET: OAuth client secret
    - REDIRECT_URL: Redirect URI registered with the provider
    - CLIENT_URL: Trusted browser origin (CORS, credentials allowed)
    - TOKEN_SECRET: Secret for signing session JWTs
    - PORT: Listening port (default: 5000)
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn gateway.app.main:create_app --factory --reload --port 5000

    Production:
        auth-gateway
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .auth import auth_router
from .config import Settings, get_settings, validate_configuration
from .errors import GatewayError
from .models import HealthResponse
from .proxy import proxy_router

SERVICE_NAME = "auth-gateway"


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Configure logging
        - Log configuration (secrets omitted) and validation warnings
        - Refuse to start when validation reports errors
        - Create the shared outbound HTTP client

    Shutdown tasks:
        - Close the HTTP client
    """
    settings: Settings = app.state.settings

    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("gateway.main")

    logger.info("Starting auth gateway", extra=settings.public_view())

    report = validate_configuration(settings)
    for warning in report["warnings"]:
        logger.warning(f"Configuration warning: {warning}")
    for error in report["errors"]:
        logger.error(f"Configuration error: {error}")
    if not report["valid"]:
        raise RuntimeError(
            f"Invalid gateway configuration: {'; '.join(report['errors'])}"
        )

    app.state.http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    logger.info("Initialized outbound HTTP client")

    yield

    logger.info("Shutting down auth gateway")
    await app.state.http_client.aclose()
    app.state.http_client = None
    logger.info("Auth gateway shutdown complete")


# Create FastAPI application
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory function.

    Args:
        settings: Configuration to run with; loaded from the environment
                  when omitted.

    Returns:
        FastAPI: Configured application instance
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Auth Gateway",
        description="OIDC authorization code gateway with cookie sessions",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(proxy_router)

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> Dict[str, str]:
        """
        Health check endpoint.

        Returns:
            dict: Service health information
        """
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": __version__,
        }

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        """
        Render gateway errors as {"message": ...} with the mapped status.

        Only the public message is returned; the detail stays in the logs.
        """
        logger = logging.getLogger("gateway.main")
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.detail}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": exc.status_code,
            },
            exc_info=exc if exc.status_code >= 500 else None,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.
        """
        logger = logging.getLogger("gateway.main")
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content={"message": "Server error"}
        )

    return app


def run() -> None:
    """
    Console entry point: load settings from the environment and serve.
    """
    settings = get_settings()

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()

"""
Adventure Booking API - Main Application Entry Point

REST backend for the adventure platform:
- Password signup with e-mail OTP verification, plus identity-provider webhook signup
- Item bookings paid by card (Revolut orders) or cash
- Read-only user achievements and a reverse-geocoding helper
- Structured logging with request correlation and a uniform error envelope
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adventure_api.api.errors import register_exception_handlers
from adventure_api.api.middleware import RequestLoggingMiddleware
from adventure_api.api.router import api_router
from adventure_api.clients.revolut import RevolutClient
from adventure_api.core.config import Settings, get_settings
from adventure_api.core.logging import get_logger, setup_logging
from adventure_api.core.metrics import metrics_endpoint
from adventure_api.db.session import Database


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    payment_client: Optional[RevolutClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)
    logger = get_logger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle: startup and shutdown hooks."""
        logger.info(
            "application_starting",
            app=settings.APP_NAME,
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
        )
        yield
        await app.state.payment_client.aclose()
        await app.state.database.dispose()
        logger.info("application_shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Adventure platform API: auth, item bookings, achievements",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Explicit handles instead of module globals; routes reach them via dependencies
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.payment_client = payment_client or RevolutClient.from_settings(settings)

    # Browsers reject credentialed requests to a wildcard origin
    allow_all = "*" in settings.CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for Docker and load balancers."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/metrics", tags=["Health"], include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("adventure_api.main:app", host="0.0.0.0", port=settings.PORT)

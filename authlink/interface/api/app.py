"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authlink.config import Settings
from authlink.interface.api.routes import account, auth, health
from authlink.util.di.container import create_container, setup_di
from authlink.util.logging import setup_logging
from authlink.util.observability import instrument_fastapi, instrument_httpx


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, conftest.py does.

    Args:
        container: DI container to use instead of the production one
    """
    settings = Settings()
    setup_logging(settings)

    # Logfire must be configured before instrumentation
    instrument_httpx()

    app_instance = FastAPI(
        title="authlink",
        description="Authentication service that links conflicting sign-in methods to one account",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    # Session cookies need explicit origins, never "*"
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(account.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
app = create_app()

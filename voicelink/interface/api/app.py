"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicelink.config import Settings
from voicelink.domain.service import WhatsAppSender
from voicelink.interface.api.routes import auth, health, invitations, whatsapp
from voicelink.interface.error import register_exception_handlers
from voicelink.util.di.container import create_container, setup_di
from voicelink.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resolve the WhatsApp sender at startup.

    A misconfigured or unknown sender raises here, so the service refuses to
    start instead of failing on the first OTP request.
    """
    container: AsyncContainer = app.state.dishka_container
    sender = await container.get(WhatsAppSender)
    logger.info(f"WhatsApp sender ready: {sender.name}")
    yield
    await container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use, defaults to the production container
    """
    settings = Settings()

    # Instrument httpx for outbound HTTP requests
    # (Logfire must be configured before instrumentation)
    instrument_httpx()

    app_instance = FastAPI(
        title="VoiceLink API",
        description="Backend API for VoiceLink - CRM sign-in and WhatsApp verification",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Setup dependency injection
    setup_di(app_instance, container or create_container())

    register_exception_handlers(app_instance)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(whatsapp.router)
    app_instance.include_router(invitations.router)

    return app_instance

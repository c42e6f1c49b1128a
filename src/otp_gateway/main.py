"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI

from otp_gateway.api.routes import router as otp_router
from otp_gateway.channels.registry import build_registry
from otp_gateway.config import OTPPolicy, settings
from otp_gateway.otp.engine import OTPEngine
from otp_gateway.store.factory import build_store

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


def build_engine() -> OTPEngine:
    """Wire store, channel registry and policy from configuration."""
    return OTPEngine(
        store=build_store(settings),
        registry=build_registry(settings),
        policy=OTPPolicy.from_settings(settings),
        brand_name=settings.brand_name,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    logger.info("Starting %s …", settings.app_name)
    if app.state.engine is None:
        app.state.engine = build_engine()
    providers = app.state.engine.registry.active_providers()
    logger.info("Active providers: SMS=%s, Email=%s", providers["sms"], providers["email"])
    yield
    logger.info("Shutting down %s …", settings.app_name)
    await app.state.engine.store.close()


def create_app(engine: OTPEngine | None = None) -> FastAPI:
    """Build the application; tests inject a pre-wired *engine*."""
    app = FastAPI(
        title=settings.app_name,
        description="One-time-passcode issuance and verification over SMS and email",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.include_router(otp_router)

    @app.get("/health")
    async def health_check():
        """Simple liveness probe."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "timestamp": datetime.now(UTC).isoformat(),
            "providers": app.state.engine.registry.active_providers(),
        }

    return app


app = create_app()

"""FastAPI application initialization."""

from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.api import health, webhook
from src.config import get_settings
from src.constants import APP_TITLE, APP_VERSION
from src.logging_config import setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: observability, then handler registration."""
    settings = get_settings()

    setup_logfire(app)

    # Initialize Sentry if DSN is provided
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            environment=settings.env,
            integrations=[FastApiIntegration()],
        )

    # Handlers must be registered before the first request is served
    webhook.get_messenger()

    logfire.info(
        "Application startup complete",
        environment=settings.env,
        graph_api_version=settings.facebook_graph_api_version,
    )

    yield

    logfire.info("Application shutdown complete")


app = FastAPI(
    title=APP_TITLE,
    description="Facebook Messenger webhook receiver and event dispatcher",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Correlation ID middleware (must be first for request tracing)
app.add_middleware(CorrelationIDMiddleware)

# Register routers
app.include_router(health.router, tags=["health"])
app.include_router(webhook.router, prefix="/webhook", tags=["webhook"])


@app.get("/")
def root():
    """Root endpoint."""
    return {"message": APP_TITLE, "version": APP_VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=get_settings().port)

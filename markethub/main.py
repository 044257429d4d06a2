from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from markethub.application.use_cases.notifications import get_notification_service
from markethub.config import get_settings
from markethub.interfaces.api.routes import register_routes

SHUTDOWN_FLUSH_SECONDS = 5


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the notification service on startup and release the engine on shutdown."""

    service = get_notification_service()
    yield
    with anyio.move_on_after(SHUTDOWN_FLUSH_SECONDS):
        await service.store.wait_for_subscribers()
    if get_settings().notification_store == "sql":
        from markethub.infrastructure.database import engine

        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="MarketHub Notifications", lifespan=lifespan)

    # Storefront and admin dashboards call the API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app

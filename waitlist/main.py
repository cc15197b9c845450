"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from waitlist import __version__
from waitlist.api import api_router
from waitlist.config import get_settings
from waitlist.logging_config import configure_logging
from waitlist.middleware import RequestContextMiddleware
from waitlist.store import WaitlistStore, get_store, reset_store

settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application lifecycle events."""
    configure_logging(settings.debug)
    logger.info("Starting %s", settings.app_name, extra={"event": "app.startup"})
    yield
    reset_store()
    logger.info("Shutting down %s", settings.app_name, extra={"event": "app.shutdown"})


def create_app() -> FastAPI:
    """Build the application with middleware and routers attached."""
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Collects landing-page email signups for the waitlist",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(api_router)

    @app.get("/")
    async def root():
        """Root endpoint - service banner."""
        return {
            "service": settings.app_name,
            "version": __version__,
            "status": "operational",
        }

    @app.get("/health")
    async def health(store: WaitlistStore = Depends(get_store)):
        """Health check including store reachability."""
        store_ok = await run_in_threadpool(store.ping)
        return {"status": "healthy" if store_ok else "degraded", "store": store_ok}

    return app


app = create_app()

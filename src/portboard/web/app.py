"""
FastAPI application for portboard.

Runs on localhost only (127.0.0.1). Exposes the unified port view and
the firewall mutations as a JSON API under /api.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portboard import __version__
from portboard.web.routes import ports, settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="portboard",
        description="Host ports, UFW rules and container bindings in one view",
        version=__version__,
        docs_url="/api/docs",
        redoc_url=None,
    )

    # CORS - restrict to localhost only
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"http://(127\.0\.0\.1|localhost)(:\d+)?",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ports.router, prefix="/api", tags=["ports"])
    app.include_router(settings.router, prefix="/api", tags=["settings"])

    @app.on_event("startup")
    async def startup() -> None:
        """Initialize the database and seed default settings."""
        from portboard.storage import init_db
        from portboard.storage.repositories import SettingsRepository

        init_db()
        SettingsRepository().seed_defaults()

    return app


def run_server(host: str = "127.0.0.1", port: int = 8765) -> None:
    """Run the API with uvicorn.

    Args:
        host: Bind address. Forced to 127.0.0.1.
        port: Port to listen on.
    """
    import uvicorn

    if host != "127.0.0.1":
        logger.warning("Forcing bind to 127.0.0.1 (localhost only)")
        host = "127.0.0.1"

    logger.info("Starting portboard API at http://%s:%s/api/docs", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_level="info")

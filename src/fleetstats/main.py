"""FastAPI application for the fleetstats dashboard backend."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from fleetstats.api.routes import router
from fleetstats.config.settings import get_settings
from fleetstats.utils.logging import setup_logger_from_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown hooks.

    Startup:
    - Initialize logger from settings

    Shutdown:
    - Log shutdown message
    """
    settings = get_settings()
    logger = setup_logger_from_settings(settings)
    logger.info(
        f"fleetstats starting up (threshold={settings.significance_threshold_pct}%, "
        f"ticks={settings.desired_tick_count})"
    )

    yield

    logger.info("fleetstats shutting down...")


app = FastAPI(
    title="fleetstats",
    description="Update-fleet telemetry classification and chart aggregates",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "fleetstats", "version": "1.0.0"}


def main():
    """Main entry point for running the server."""
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()

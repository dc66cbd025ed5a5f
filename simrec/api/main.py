"""FastAPI application main module.

This module defines the main FastAPI application instance and core API
endpoints for the SimRec service. The rating store is built once during
application startup; a failure to load the data stops the service from
starting.
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI

from simrec import __version__
from simrec.api.exceptions import register_exception_handlers
from simrec.api.logging_config import RequestLoggingMiddleware, setup_logging
from simrec.api.metrics import metrics_service
from simrec.api.routes import recommend, users
from simrec.api.state import get_settings, get_store, load_store

# Configure module logger
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(
        "Starting SimRec service",
        extra={"data_dir": str(settings.data_dir), "version": __version__},
    )
    load_store(settings)
    yield
    logger.info("SimRec service stopped")


# Create FastAPI application instance
app = FastAPI(
    title="SimRec API",
    description="Neighborhood-based collaborative filtering recommendation service",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

# Include routers
app.include_router(users.router)
app.include_router(recommend.router)


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns a simple status response to verify the API is running.

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/")
def index() -> Dict[str, object]:
    """Summarize the loaded rating data.

    Responds with 503 if the rating store has not been loaded.
    """
    store = get_store()
    return {
        "msg": "SimRec recommendation service",
        "num_users": store.num_users,
        "num_items": store.num_items,
        "num_ratings": store.num_ratings,
    }


@app.get("/metrics")
def metrics() -> Dict[str, Dict]:
    """Call counts and latency per recommendation operation."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "simrec.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

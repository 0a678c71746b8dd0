"""
Application entrypoint: FastAPI app with document store lifecycle management.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.config import settings
from app.db.json_store import JsonStore
from app.infrastructure.observability.logging import get_logger, log_request, setup_logging
from app.middleware import RequestContextMiddleware
from app.routes import contacts, health, leaderboard, protected, users

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store at startup and flush it at shutdown."""

    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    store = JsonStore(settings.data_path(), settings.default_store_settings())
    try:
        store.open()
    except Exception as e:
        logger.error("Failed to open store", error=str(e), path=str(store.path))
        raise

    app.state.store = store

    yield

    logger.info("Application shutting down")
    try:
        store.close()
    except Exception as e:
        logger.error("Error closing store", error=str(e))
    finally:
        app.state.store = None


app = FastAPI(
    title="Ambassador Outreach API",
    description="Contact submission, admin review, credits and leaderboard",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Include routers
app.include_router(health.router)
app.include_router(protected.router)
app.include_router(users.router)
app.include_router(contacts.router)
app.include_router(leaderboard.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


# Outermost, so request_id is bound before the request logger runs
app.add_middleware(RequestContextMiddleware)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

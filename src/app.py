"""Customer profile FastAPI application.

Serves the customer REST API and, when enabled, runs the preference sync
consumer alongside it for the lifetime of the process. A broker that cannot
be reached at startup, or a broker setting that cannot be used, aborts the
lifespan, so the server exits non-zero.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 9000
"""

import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from customers.domain import customers  # noqa: E402

customers.init()

from customers.api import register_exception_handlers  # noqa: E402
from customers.api import router as customers_router  # noqa: E402
from customers.api.errors import BODY_TOO_LARGE, error_response  # noqa: E402
from customers.config import get_settings  # noqa: E402
from customers.customer.sync import PreferenceSyncHandler  # noqa: E402
from customers.messaging import build_event_publisher, set_event_publisher  # noqa: E402
from customers.messaging.consumer import create_sync_consumer  # noqa: E402
from customers.store import get_store  # noqa: E402
from customers.utils.logging import configure_logging  # noqa: E402

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = get_settings()
    publisher = build_event_publisher(settings)
    set_event_publisher(publisher)

    consumer = None
    consumer_task = None
    try:
        if settings.sync_enabled:
            await publisher.connect()
            consumer = create_sync_consumer(settings, PreferenceSyncHandler(get_store(), publisher))
            await consumer.start()
            consumer_task = asyncio.create_task(consumer.run())

        logger.info(
            "customer-service started",
            host=settings.host,
            port=settings.port,
            sync_enabled=settings.sync_enabled,
            analytics_transport=settings.analytics_transport,
        )

        yield
    finally:
        try:
            if consumer_task is not None:
                consumer.stop()
                await consumer_task
        finally:
            if consumer is not None:
                await consumer.close()
            await publisher.close()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Customer Profile API",
    description="Customer profiles, preferences and preference sync",
    lifespan=lifespan,
)


@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    """Reject requests whose body exceeds the configured limit."""
    limit = get_settings().max_body_bytes
    content_length = request.headers.get("content-length")
    if content_length is not None:
        if content_length.isdigit() and int(content_length) > limit:
            return error_response(413, BODY_TOO_LARGE)
    elif request.method in ("POST", "PUT", "PATCH") and len(await request.body()) > limit:
        return error_response(413, BODY_TOO_LARGE)
    return await call_next(request)


register_exception_handlers(app)
app.include_router(customers_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    settings = get_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "sync_enabled": settings.sync_enabled,
            "analytics_transport": settings.analytics_transport,
        }
    )

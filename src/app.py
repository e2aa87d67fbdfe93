"""PartStore FastAPI application.

Web server that processes commands synchronously via HTTP. Every request runs
inside the partstore domain context, so command handlers and queries can use
``current_domain``.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from partstore import config
from partstore.domain import partstore
from partstore.utils.logging import add_context, clear_context, get_logger

partstore.init()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="PartStore API",
    description="Auto spare parts store: catalogue, cart, orders, payments and notifications",
)
app.state.domain = partstore

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context for each request."""
    with partstore.domain_context():
        response = await call_next(request)
    return response


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Bind request identifiers into the structlog context for the request."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        if response.status_code >= 500:
            logger.error("request_completed", status=response.status_code)
        else:
            logger.debug("request_completed", status=response.status_code)
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------
from partstore.api.errors import register_error_handlers  # noqa: E402

register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from partstore.api.routes import (  # noqa: E402
    accounts,
    cart,
    dashboard,
    notifications,
    orders,
    payments,
    products,
    realtime,
    wishlist,
)

app.include_router(accounts.router)
app.include_router(accounts.admin_router)
app.include_router(products.router)
app.include_router(cart.router)
app.include_router(orders.router)
app.include_router(payments.router)
app.include_router(dashboard.router)
app.include_router(wishlist.router)
app.include_router(notifications.router)
app.include_router(realtime.router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": partstore.name})

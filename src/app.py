"""Pharmacy ordering FastAPI application.

Serves the cart and order endpoints. Every request runs inside the ordering
domain context with its correlation id bound into the log context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.api.errors import register_ordering_exception_handlers
from ordering.api.routes import cart_router, order_router
from ordering.domain import ordering
from ordering.utils.logging import add_context, clear_context, configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay from [tool.protean] in pyproject.toml.
configure_logging()
ordering.init()

CORRELATION_HEADER = "X-Correlation-ID"

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Pharmacy Ordering API",
    description="Cart, checkout and order history",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context and bind the request's correlation id."""
    correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
    request.state.correlation_id = correlation_id
    add_context(correlation_id=correlation_id, path=request.url.path)
    try:
        with ordering.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


register_ordering_exception_handlers(app)
app.include_router(cart_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": ordering.name})

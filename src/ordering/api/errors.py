"""Map ordering domain errors onto HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from ordering.exceptions import OrderingError

logger = structlog.get_logger(__name__)


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        code=exc.code,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


def register_ordering_exception_handlers(app: FastAPI) -> None:
    """Install handlers for ordering errors and for Protean's own exceptions."""
    register_exception_handlers(app)
    app.add_exception_handler(OrderingError, ordering_error_handler)

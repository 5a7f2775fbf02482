import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.errors import register_ordering_exception_handlers
from ordering.api.routes import cart_router, order_router


@pytest.fixture()
def client(catalogue, compliance):
    app = FastAPI()
    register_ordering_exception_handlers(app)
    app.include_router(cart_router)
    app.include_router(order_router)
    return TestClient(app)


@pytest.fixture()
def as_user():
    def _headers(user_id="user-001", **extra):
        return {"X-User-Id": user_id, **extra}

    return _headers

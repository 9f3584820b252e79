from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI
from fastapi.testclient import TestClient

from envelope.decoder import to_wire, wrap, wrap_error
from envelope.types import Customer, Supplier

DEFAULT_BASE_URL = "http://contoso.come"


def build_mock_app() -> FastAPI:
    """
    Deterministic stand-in for the remote API. Never calls the internet.
    Unmatched paths fall through to FastAPI's 404.
    """
    app = FastAPI(title="Envelope Mock API")

    customer = to_wire(wrap(Customer(customer_id=1, name="Mike Ross")))
    supplier = to_wire(wrap(Supplier(supplier_id=1, company="Microsoft")))
    error = to_wire(wrap_error(99, "Error data type"))
    version = to_wire(wrap("v 2.15.144"))

    @app.get("/customer/{customer_id}")
    def get_customer(customer_id: str) -> Dict[str, Any]:
        return customer

    @app.get("/supplier/{supplier_id}")
    def get_supplier(supplier_id: str) -> Dict[str, Any]:
        return supplier

    @app.get("/customers")
    def list_customers() -> Dict[str, Any]:
        return error

    @app.get("/version/")
    def get_version() -> Dict[str, Any]:
        return version

    return app


def mock_client(base_url: str = DEFAULT_BASE_URL) -> TestClient:
    """In-process httpx client bound to the mock app; no socket is opened."""
    return TestClient(build_mock_app(), base_url=base_url)

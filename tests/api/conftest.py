"""API test fixtures: a TestClient over real services and a temp JSON store."""

import pytest
from starlette.testclient import TestClient

from api.app import build_services, create_app


@pytest.fixture
def services(config, local_store, clock):
    return build_services(config, store=local_store, clock=clock)


@pytest.fixture
def client(config, services):
    """Client that turns unhandled errors into 500 responses instead of raising."""
    app = create_app(config, services)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def create_invoice(client):
    """POST a create action and return the created invoice's JSON."""

    def _create(**overrides):
        data = {
            "customerName": "Asha Rao",
            "companyName": "Rao Textiles",
            "amount": 1000,
            "invoiceDate": "2024-01-01",
            "paymentTerms": 30,
        }
        data.update(overrides)
        response = client.post("/api/actions", json={"domain": "invoice", "action": "create", "data": data})
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _create

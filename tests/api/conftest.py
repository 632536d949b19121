"""API test fixtures - full app over in-memory Valkey, upstream mocked with responses."""

import pytest
import responses
from fastapi.testclient import TestClient

from clients.http_transport import RequestsTransport
from clients.icloud_client import VALIDATE_URL
from main import create_app

ADMIN_TOKEN = "admin-secret"
BASE_URL = "https://p68-maildomainws.icloud.com"
GENERATE_URL = f"{BASE_URL}/v1/hme/generate"
RESERVE_URL = f"{BASE_URL}/v1/hme/reserve"


def _reserve_result(note: str = "test", is_active: bool = True, forward_to: str | None = "me@example.com") -> dict:
    return {
        "success": True,
        "timestamp": 1700000000,
        "result": {
            "hme": {
                "hme": "abc@icloud.com",
                "forwardToEmail": forward_to,
                "isActive": is_active,
                "label": "Generated by hme_bridge",
                "note": note,
                "createTimestamp": 1700000000000,
            }
        },
    }


@pytest.fixture
def app(config, valkey):
    """Bridge app with a real requests transport (intercepted by responses)."""
    return create_app(config, valkey, ADMIN_TOKEN, transport=RequestsTransport())


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def upstream():
    """Activate responses and register the discovery + generate steps."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(
            responses.POST,
            VALIDATE_URL,
            json={"webservices": {"premiummailsettings": {"url": BASE_URL}}},
        )
        rsps.add(
            responses.POST,
            GENERATE_URL,
            json={"success": True, "result": {"hme": "abc@icloud.com"}},
        )
        yield rsps


@pytest.fixture
def reserve_result():
    """Factory for a successful reserve envelope."""
    return _reserve_result


@pytest.fixture
def upstream_urls():
    return {"validate": VALIDATE_URL, "generate": GENERATE_URL, "reserve": RESERVE_URL}

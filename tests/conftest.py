"""Shared test fixtures for hme-bridge test suite."""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton to pick up env vars
import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

from auth.config import BridgeConfig
from auth.credential_store import CredentialStore
from auth.types import Credential
from clients.valkey_client import ValkeyClient


# =============================================================================
# TEST DATA CONSTANTS
# =============================================================================

REQUIRED_COOKIES = [
    {"name": "X-APPLE-DS-WEB-SESSION-TOKEN", "value": "session-abc"},
    {"name": "X-APPLE-WEBAUTH-TOKEN", "value": "webauth-def"},
    {"name": "X-APPLE-WEBAUTH-USER", "value": "user-ghi"},
]

EXPECTED_COOKIE_HEADER = (
    "X-APPLE-DS-WEB-SESSION-TOKEN=session-abc; "
    "X-APPLE-WEBAUTH-TOKEN=webauth-def; "
    "X-APPLE-WEBAUTH-USER=user-ghi"
)

TEST_TOKEN = "abc123"
TEST_ADMIN_TOKEN = "admin-secret"


# =============================================================================
# VALKEY FIXTURES
# =============================================================================


class InMemoryValkey:
    """Dict-backed stand-in exposing the ValkeyClient methods the store uses."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def get_json(self, key):
        value = self.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in key '{key}': {e}")

    def set_json(self, key, value):
        self.set(key, json.dumps(value, separators=(",", ":")))


@pytest.fixture
def valkey():
    """In-memory Valkey, fresh per test."""
    return InMemoryValkey()


@pytest.fixture
def mock_valkey():
    """Mock ValkeyClient for asserting on calls."""
    return Mock(spec=ValkeyClient)


# =============================================================================
# CONFIG & STORE FIXTURES
# =============================================================================


@pytest.fixture
def config():
    """Default bridge config."""
    return BridgeConfig()


@pytest.fixture
def store(valkey, config):
    """CredentialStore over in-memory Valkey."""
    return CredentialStore(valkey, key=config.credentials_key)


@pytest.fixture
def stored_credential(store):
    """One credential with all required cookies, saved under TEST_TOKEN."""
    credential = Credential(
        label="alice",
        token=TEST_TOKEN,
        cookie=json.dumps(REQUIRED_COOKIES),
    )
    store.save_all([credential])
    return credential


@pytest.fixture
def required_cookies():
    """The three upstream cookies, as a client would send them."""
    return [dict(c) for c in REQUIRED_COOKIES]


@pytest.fixture
def cookie_header():
    """Cookie header built from required_cookies."""
    return EXPECTED_COOKIE_HEADER

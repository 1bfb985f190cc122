"""
Shared fixtures: the fake backend and the client objects wired to it.
"""

import json

import httpx
import pytest

from kneeklinic.main import KneeKlinicApp
from kneeklinic.services.api_client import ApiClient
from kneeklinic.services.session_service import reset_auth_session
from kneeklinic.storage.local_store import InMemoryStore
from kneeklinic.utils.constants import STORAGE_KEY_TOKEN, STORAGE_KEY_USER

from tests.fake_backend import BASE_URL, PATIENT, TOKEN, FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def logged_in_store() -> InMemoryStore:
    """Store as left behind by a previous login."""
    return InMemoryStore({STORAGE_KEY_TOKEN: TOKEN, STORAGE_KEY_USER: json.dumps(PATIENT)})


@pytest.fixture
def transport(backend) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=backend.app)


@pytest.fixture
def api_client(logged_in_store, transport) -> ApiClient:
    return ApiClient(logged_in_store, base_url=BASE_URL, transport=transport)


@pytest.fixture
def kk_app(logged_in_store, transport):
    """Fully wired client with the stored session already loaded."""
    app = KneeKlinicApp(logged_in_store, base_url=BASE_URL, transport=transport)
    app.session.load()
    yield app
    reset_auth_session()


@pytest.fixture
def guest_app(store, transport):
    """Fully wired client with nobody logged in."""
    app = KneeKlinicApp(store, base_url=BASE_URL, transport=transport)
    app.session.load()
    yield app
    reset_auth_session()

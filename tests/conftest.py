import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from services.presence_manager import PresenceManager
from services.session_store import SessionStore


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def presence(store):
    return PresenceManager(store)


@pytest.fixture
def app():
    return create_app(Settings())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def global_client():
    with TestClient(create_app(Settings(broadcast_scope="global"))) as test_client:
        yield test_client

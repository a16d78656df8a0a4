"""
Shared fixtures for kinvey_request tests.
"""
import pytest

from kinvey_request.client import ClientContext, reset_shared_client
from kinvey_request.settings import RequestSettings


@pytest.fixture(autouse=True)
def _reset_shared_client():
    """Each test starts without a shared client."""
    reset_shared_client()
    yield
    reset_shared_client()


@pytest.fixture
def settings():
    """Settings with a small properties cap for boundary tests."""
    return RequestSettings(max_properties_bytes=64)


@pytest.fixture
def active_user():
    """Active user record carrying a session token."""
    return {"_id": "user-1", "username": "alice", "_kmd": {"authtoken": "session-token-123"}}


@pytest.fixture
def app_client():
    """Client with app credentials only."""
    return ClientContext(app_key="kid_app", app_secret="app-secret")


@pytest.fixture
def master_client():
    """Client with app and master credentials."""
    return ClientContext(app_key="kid_app", app_secret="app-secret", master_secret="master-secret")


@pytest.fixture
def session_client(active_user):
    """Client with master credentials and a logged-in user."""
    return ClientContext(
        app_key="kid_app",
        app_secret="app-secret",
        master_secret="master-secret",
        active_user=active_user,
    )


@pytest.fixture
def empty_client():
    """Client with no credentials."""
    return ClientContext()

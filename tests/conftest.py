"""Pytest configuration and fixtures for RosterDesk tests."""

from typing import Generator

import httpx
import pytest
from roster_fakes import ADMIN_EMAIL, ADMIN_PASSWORD, API_URL, FakeRosterServer

from rosterdesk import MemoryStorage, RosterApiClient, SessionStore
from rosterdesk.logutils import reset_config


@pytest.fixture(autouse=True)
def reset_log_config() -> Generator[None, None, None]:
    """Reload logging configuration from the environment for each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_server() -> FakeRosterServer:
    return FakeRosterServer()


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore(MemoryStorage())


@pytest.fixture
def api_client(fake_server: FakeRosterServer, session_store: SessionStore) -> Generator[RosterApiClient, None, None]:
    """Client wired to the fake server; not logged in."""
    client = RosterApiClient(API_URL, session_store, transport=httpx.MockTransport(fake_server.handle))
    yield client
    client.close()


@pytest.fixture
def logged_in_client(api_client: RosterApiClient) -> RosterApiClient:
    """Client holding a valid admin session."""
    api_client.session_store.save(api_client.login(ADMIN_EMAIL, ADMIN_PASSWORD))
    return api_client

"""Shared test fixtures for API tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pubboard.api.app import create_app
from pubboard.api.deps import get_session
from pubboard.dashboard.session import DashboardSession


@pytest.fixture()
def session(snapshot_path: Path) -> DashboardSession:
    """A dashboard session loaded from the sample snapshot."""
    dashboard = DashboardSession(str(snapshot_path))
    dashboard.load()
    return dashboard


@pytest.fixture()
def client(session: DashboardSession) -> TestClient:
    """Create a test client with the session dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_session] = lambda: session
    return TestClient(application)


@pytest.fixture()
def unavailable_client(tmp_path: Path) -> TestClient:
    """Test client whose snapshot could not be loaded."""
    dashboard = DashboardSession(str(tmp_path / "missing.json"))
    dashboard.load()
    application = create_app()
    application.dependency_overrides[get_session] = lambda: dashboard
    return TestClient(application)

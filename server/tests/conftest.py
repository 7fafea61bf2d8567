"""Shared test configuration and fixtures for registration intake tests"""

import logging

import pytest
from fastapi.testclient import TestClient

from registration_intake import services
from registration_intake.main import app
from registration_intake.services import (
    get_export_materializer,
    get_registration_store,
)
from registration_intake.services.export_service import ExportMaterializer
from registration_intake.services.registration_store import RegistrationStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def data_dir(tmp_path):
    """Data directory that does not exist yet; the store creates it"""
    return tmp_path / "data"


@pytest.fixture
def registration_store(data_dir):
    """Create a RegistrationStore rooted in a temporary directory"""
    return RegistrationStore(data_dir)


@pytest.fixture
def export_materializer(registration_store):
    """Create an ExportMaterializer writing next to the test store"""
    return ExportMaterializer(registration_store)


@pytest.fixture
def blocked_dir(tmp_path):
    """A path whose parent is a regular file, so it can never be created"""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return blocker / "data"


@pytest.fixture
def shared_services(monkeypatch, registration_store, export_materializer):
    """Point the module-level service singletons at the test store"""
    monkeypatch.setattr(services, "_registration_store", registration_store)
    monkeypatch.setattr(services, "_export_materializer", export_materializer)
    return registration_store, export_materializer


def _override_client(store, materializer):
    original_overrides = app.dependency_overrides.copy()

    app.dependency_overrides.clear()
    app.dependency_overrides[get_registration_store] = lambda: store
    app.dependency_overrides[get_export_materializer] = lambda: materializer

    # No context manager: the lifespan (and its background refresh) stays off
    client = TestClient(app)

    yield client

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)


@pytest.fixture
def client(registration_store, export_materializer):
    """Test client whose store and materializer use the temporary directory"""
    yield from _override_client(registration_store, export_materializer)


@pytest.fixture
def broken_store_client(blocked_dir):
    """Test client whose store cannot create its data directory"""
    store = RegistrationStore(blocked_dir)
    yield from _override_client(store, ExportMaterializer(store))


@pytest.fixture
def broken_export_client(registration_store, blocked_dir):
    """Test client whose store works but whose exports cannot be written"""
    materializer = ExportMaterializer(registration_store, export_dir=blocked_dir)
    yield from _override_client(registration_store, materializer)

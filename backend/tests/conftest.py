import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Ensure the backend packages are importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the start-up database and mirror files out of the working tree.
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="cwl-roster-tests-"))

from cwl_app import models  # noqa: E402,F401
from cwl_app.core.config import Settings, get_settings  # noqa: E402
from cwl_app.db import get_session  # noqa: E402
from cwl_app.main import app  # noqa: E402
from cwl_app.sessions import RosterSessionRegistry  # noqa: E402

ADMIN_PASSWORD = "test-password"


@pytest.fixture(name="settings")
def settings_fixture(tmp_path: Path) -> Settings:
    return Settings(data_dir=str(tmp_path), admin_password=ADMIN_PASSWORD, clash_api_key="test-key")


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine


@pytest.fixture(name="db_session")
def db_session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(engine, settings: Settings):
    def _get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_test_session
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.roster_sessions = RosterSessionRegistry()
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.pop(get_session, None)
    app.dependency_overrides.pop(get_settings, None)


@pytest.fixture(name="admin_headers")
def admin_headers_fixture() -> dict[str, str]:
    return {"X-Admin-Password": ADMIN_PASSWORD}

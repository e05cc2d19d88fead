"""
Shared fixtures.

Every API test runs twice: against the SQLAlchemy backend (SQLite file) and
against the flat JSON file backend, both created under tmp_path.
"""
import os
import tempfile
from pathlib import Path

# Settings are read at import time, so configure the environment first.
_ROOT = Path(tempfile.mkdtemp(prefix="organijob-tests-"))
PUBLIC_DIR = _ROOT / "public"
PUBLIC_DIR.mkdir()
(PUBLIC_DIR / "index.html").write_text("<h1>OrganiJob</h1>", encoding="utf-8")
(PUBLIC_DIR / "app.js").write_text("console.log('ok');", encoding="utf-8")
(_ROOT / "secret.txt").write_text("top secret", encoding="utf-8")

os.environ["ORGANIJOB_PUBLIC_DIR"] = str(PUBLIC_DIR)
os.environ["ORGANIJOB_RATE_LIMIT_ENABLED"] = "false"
os.environ["ORGANIJOB_DATABASE_URL"] = f"sqlite:///{_ROOT / 'unused.db'}"

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.rate_limit import limiter
from app.storage import get_storage
from app.storage.sql import SqlStorage
from app.storage.json_file import JsonFileStorage

limiter.enabled = False

PASSWORD = "motdepasse123"


@pytest.fixture(params=["database", "file"])
def storage(request, tmp_path):
    if request.param == "database":
        backend = SqlStorage(f"sqlite:///{tmp_path / 'organijob.db'}")
    else:
        backend = JsonFileStorage(str(tmp_path / "organijob.json"))
    backend.init()
    yield backend
    if request.param == "database":
        backend.engine.dispose()


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email="alice@example.com", password=PASSWORD) -> str:
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["token"]


@pytest.fixture
def token(client):
    return register(client)

import os
import tempfile
from pathlib import Path

import pytest

# settings are read at import time, so the environment goes first
_TMP = Path(tempfile.mkdtemp(prefix="cmp-tests-"))
DB_PATH = _TMP / "test.db"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["ADMIN_EMAIL"] = "admin@ciptamandiri.co.id"
os.environ["ADMIN_PASSWORD"] = "rahasia123"
os.environ["ADMIN_NAME"] = "Admin CMP"
os.environ["MEDIA_DIR"] = str(_TMP / "media")
os.environ["SITE_TIMEZONE"] = "Asia/Jakarta"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STREAM_INTERVAL_SECONDS"] = "0"

from fastapi.testclient import TestClient  # noqa: E402

from ciptamandiri.main import app  # noqa: E402

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture
def client():
    if DB_PATH.exists():
        DB_PATH.unlink()
    # startup creates the tables and the bootstrap admin
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    # drop the auth cookie so requests without headers stay anonymous
    client.cookies.clear()
    return r.json()["access_token"]


@pytest.fixture
def admin_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_post(client, admin_headers):
    def _make(**overrides):
        return create_post(client, admin_headers, **overrides)
    return _make


def create_post(client, headers, **overrides):
    payload = {
        "judul": "Tips Membeli Rumah",
        "ringkasan": "Ringkasan singkat",
        "konten": "<p>Isi artikel</p>",
        "kategori": "Tips",
        "penulis": "Tim CMP",
        "gambar_url": None,
    }
    payload.update(overrides)
    r = client.post("/api/blog", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["data"]

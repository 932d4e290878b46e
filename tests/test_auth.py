from conftest import ADMIN_EMAIL, ADMIN_PASSWORD

from ciptamandiri import config
from ciptamandiri.auth import create_access_token, decode_access_token, get_password_hash, verify_password


def test_password_hash_roundtrip():
    hashed = get_password_hash("rahasia")
    assert hashed != "rahasia"
    assert verify_password("rahasia", hashed)
    assert not verify_password("salah", hashed)


def test_verify_password_rejects_unknown_hash():
    assert verify_password("rahasia", "not-a-hash") is False


def test_decode_rejects_garbage_token():
    assert decode_access_token("abc.def.ghi") is None
    assert decode_access_token(create_access_token({"sub": "a@b.co"})) == "a@b.co"


def test_login_success_sets_cookie(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["admin"]["email"] == ADMIN_EMAIL
    assert config.TOKEN_COOKIE in r.cookies


def test_login_wrong_password(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "salah"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Email atau password salah"


def test_login_unknown_email(client):
    r = client.post("/api/auth/login", json={"email": "orang@lain.co.id", "password": ADMIN_PASSWORD})
    assert r.status_code == 401


def test_verify_token(client, token):
    r = client.post("/api/auth/verify", json={"token": token})
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert r.json()["admin"]["email"] == ADMIN_EMAIL

    r = client.post("/api/auth/verify", json={"token": "rusak"})
    assert r.json() == {"success": False, "admin": None}


def test_me_requires_token(client, admin_headers):
    assert client.get("/api/auth/me").status_code == 401
    r = client.get("/api/auth/me", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["nama"] == "Admin CMP"


def test_token_accepted_from_query_param(client, token):
    r = client.get("/api/auth/me", params={"token": token})
    assert r.status_code == 200


def test_cookie_session_and_logout(client):
    client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert client.get("/api/auth/me").status_code == 200

    r = client.post("/api/auth/logout")
    assert r.status_code == 204
    assert client.get("/api/auth/me").status_code == 401

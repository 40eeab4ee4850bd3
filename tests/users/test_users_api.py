from __future__ import annotations

import importlib
import logging

import pytest

from account_service.main import create_app


@pytest.fixture
def app():
    return create_app(importlib.import_module("account_service.config.testing"))


@pytest.fixture
def client(app):
    return app.test_client()


def _register(client, **overrides):
    body = {"email": "a@x.com", "username": "a", "full_name": "Ana", "password": "pw"}
    body.update(overrides)
    return client.post("/users/register", json=body)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_register_returns_created_user_without_hash(client):
    resp = _register(client, birth_date="1990-05-17")

    assert resp.status_code == 201
    data = resp.get_json()
    assert data["id"] == 1
    assert data["role"] == "USER"
    assert data["status"] is True
    assert data["birth_date"] == "1990-05-17"
    assert "password_hash" not in data
    assert "password" not in data


def test_register_stores_hashed_password(app, client):
    _register(client)
    stored = app.extensions["account_service"].users_repo.get_by_email("a@x.com")

    assert stored.password_hash != "pw"
    assert app.extensions["account_service"].hasher.verify("pw", stored.password_hash)


def test_register_duplicate_email_is_bad_request(client):
    _register(client)
    resp = _register(client, username="other")

    assert resp.status_code == 400
    assert "Email" in resp.get_json()["error"]
    assert len(client.get("/users/all").get_json()) == 1


def test_register_rejects_bad_payloads(client):
    assert _register(client, password="").status_code == 400
    assert _register(client, birth_date="17/05/1990").status_code == 400
    assert client.post("/users/register", data="nope", content_type="text/plain").status_code == 400


def test_lookup_by_email_and_username(client):
    _register(client)

    assert client.get("/users/email/a@x.com").get_json()["username"] == "a"
    assert client.get("/users/username/a").get_json()["email"] == "a@x.com"
    assert client.get("/users/email/ghost@x.com").status_code == 404
    assert client.get("/users/username/ghost").status_code == 404


def test_list_all_in_id_order(client):
    _register(client)
    _register(client, email="b@x.com", username="b")

    users = client.get("/users/all").get_json()
    assert [u["username"] for u in users] == ["a", "b"]


def test_update_partial(client):
    _register(client)

    resp = client.put("/users/update/1", json={"full_name": "Ana Maria", "phone_number": "123"})

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["full_name"] == "Ana Maria"
    assert data["phone_number"] == "123"
    assert data["email"] == "a@x.com"


def test_update_errors(client):
    _register(client)
    _register(client, email="b@x.com", username="b")

    assert client.put("/users/update/99", json={"full_name": "X"}).status_code == 404
    assert client.put("/users/update/1", json={"username": "b"}).status_code == 400
    assert client.put("/users/update/1", json={"password": ""}).status_code == 400
    assert client.get("/users/username/a").status_code == 200


def test_delete(client):
    _register(client)

    resp = client.delete("/users/delete/1")
    assert resp.status_code == 200
    assert client.get("/users/email/a@x.com").status_code == 404
    assert client.delete("/users/delete/1").status_code == 404


def test_request_password_reset(client, caplog):
    _register(client)
    caplog.set_level(logging.INFO, logger="account_service")

    assert client.post("/users/request-password-reset", json={"email": "a@x.com"}).status_code == 200
    assert client.post("/users/request-password-reset", data="a@x.com", content_type="text/plain").status_code == 200
    assert client.post("/users/request-password-reset", json={"email": "ghost@x.com"}).status_code == 404
    assert client.post("/users/request-password-reset", json={}).status_code == 400

    requested = [r for r in caplog.records if "no mail server configured" in r.getMessage()]
    assert len(requested) == 2
    assert all("a@x.com" not in r.getMessage() for r in caplog.records)

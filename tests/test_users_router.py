from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from webook.app import create_app
from webook.core.jwt_tokens import TOKEN_HEADER
from webook.db import get_engine, models
from webook.ioc import build_container

PHONE = "+8613800000000"
PASSWORD = "hello#world123"


@pytest.fixture()
def client(temp_db, redis_client, sms):
    container = build_container(redis_client=redis_client, sms=sms, async_cache_refresh=False)
    with TestClient(create_app(container)) as client:
        yield client


def _signup_and_login(client) -> dict:
    client.post(
        "/users/signup",
        json={"email": "alice@example.com", "password": PASSWORD, "confirmPassword": PASSWORD},
    )
    resp = client.post("/users/login", json={"email": "alice@example.com", "password": PASSWORD})
    return {"Authorization": f"Bearer {resp.headers[TOKEN_HEADER]}"}


def test_signup_validates_input(client):
    bad_email = client.post("/users/signup", json={"email": "nope", "password": PASSWORD, "confirmPassword": PASSWORD})
    mismatch = client.post(
        "/users/signup", json={"email": "a@b.com", "password": PASSWORD, "confirmPassword": "other#pass1"}
    )
    weak = client.post("/users/signup", json={"email": "a@b.com", "password": "password", "confirmPassword": "password"})

    assert bad_email.json()["code"] == 4
    assert mismatch.json()["code"] == 4
    assert weak.json()["code"] == 4


def test_signup_duplicate_email(client):
    body = {"email": "alice@example.com", "password": PASSWORD, "confirmPassword": PASSWORD}

    assert client.post("/users/signup", json=body).json()["code"] == 0
    assert client.post("/users/signup", json=body).json() == {
        "code": 4,
        "msg": "email already registered",
        "data": None,
    }


def test_login_sets_jwt_header(client):
    headers = _signup_and_login(client)

    assert headers["Authorization"].startswith("Bearer ")


def test_login_wrong_password(client):
    _signup_and_login(client)

    resp = client.post("/users/login", json={"email": "alice@example.com", "password": "wrong#pass1"})

    assert resp.json()["code"] == 4
    assert TOKEN_HEADER not in resp.headers


def test_profile_requires_token(client):
    assert client.get("/users/profile").status_code == 401
    assert client.get("/users/profile", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_token_bound_to_user_agent(client):
    headers = _signup_and_login(client)
    headers["User-Agent"] = "another-browser"

    assert client.get("/users/profile", headers=headers).status_code == 401


def test_edit_then_profile(client, redis_client):
    headers = _signup_and_login(client)

    resp = client.post(
        "/users/edit",
        json={"nickname": "Alice", "birthday": "1990-05-17", "aboutMe": "hi"},
        headers=headers,
    )
    assert resp.json()["code"] == 0

    profile = client.get("/users/profile", headers=headers).json()["data"]
    assert profile == {
        "nickname": "Alice",
        "email": "alice@example.com",
        "phone": "",
        "aboutMe": "hi",
        "birthday": "1990-05-17",
    }
    assert redis_client.keys("user:info:*") != []


def test_edit_rejects_bad_birthday(client):
    headers = _signup_and_login(client)

    resp = client.post("/users/edit", json={"nickname": "x", "birthday": "17/05/1990"}, headers=headers)

    assert resp.json()["code"] == 4


def test_sms_login_flow(client, sms):
    assert client.post("/users/login_sms/code/send", json={"phone": ""}).json()["code"] == 4

    assert client.post("/users/login_sms/code/send", json={"phone": PHONE}).json()["code"] == 0
    too_soon = client.post("/users/login_sms/code/send", json={"phone": PHONE}).json()
    assert too_soon["code"] == 4
    assert "frequently" in too_soon["msg"]

    wrong = client.post("/users/login_sms", json={"phone": PHONE, "code": "not-it"})
    assert wrong.json()["code"] == 4

    resp = client.post("/users/login_sms", json={"phone": PHONE, "code": sms.last_code})
    assert resp.json()["code"] == 0
    token = resp.headers[TOKEN_HEADER]

    profile = client.get("/users/profile", headers={"Authorization": f"Bearer {token}"}).json()
    assert profile["data"]["phone"] == PHONE

    replay = client.post("/users/login_sms", json={"phone": PHONE, "code": sms.last_code})
    assert replay.json()["code"] == 4


def test_sms_delivery_failure_is_a_system_error(temp_db, redis_client, failing_sms):
    container = build_container(redis_client=redis_client, sms=failing_sms, async_cache_refresh=False)
    with TestClient(create_app(container)) as client:
        resp = client.post("/users/login_sms/code/send", json={"phone": PHONE})

    assert resp.json()["code"] == 5


def test_database_outage_is_a_system_error(client):
    body = {"email": "alice@example.com", "password": PASSWORD, "confirmPassword": PASSWORD}
    assert client.post("/users/signup", json=body).json()["code"] == 0
    models.Base.metadata.drop_all(bind=get_engine())

    login = client.post("/users/login", json={"email": "alice@example.com", "password": PASSWORD})
    signup = client.post("/users/signup", json={**body, "email": "bob@example.com"})

    assert login.status_code == 200
    assert login.json() == {"code": 5, "msg": "system error", "data": None}
    assert TOKEN_HEADER not in login.headers
    assert signup.json()["code"] == 5

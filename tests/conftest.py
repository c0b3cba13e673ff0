# tests/conftest.py — Shared test fixtures
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import ensure_indexes, get_db
from main import app
from workspace_service import WorkspaceService

WORKSPACE_PAYLOAD = {
    "name": "Riverside Tower",
    "location": "Colombo",
    "stage": "Foundation",
    "type": "Commercial",
    "budget": "LKR 250M",
}


@pytest.fixture()
def db():
    database = mongomock.MongoClient()["siteguard_test"]
    ensure_indexes(database)
    return database


@pytest.fixture()
def service(db):
    return WorkspaceService(db)


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup(client, email="owner@siteguard.dev", password="Password123!", name="Site Owner"):
    res = client.post("/auth/signup", json={"name": name, "email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["data"]


def get_auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def owner(client):
    return signup(client)


@pytest.fixture()
def auth_headers(owner):
    return get_auth_headers(owner["token"])


@pytest.fixture()
def other_headers(client):
    data = signup(client, email="intruder@siteguard.dev", name="Someone Else")
    return get_auth_headers(data["token"])


@pytest.fixture()
def workspace(client, auth_headers):
    res = client.post("/workspaces", json=WORKSPACE_PAYLOAD, headers=auth_headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]

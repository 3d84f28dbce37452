from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from backend.app.main import create_app
from core.security.session import SessionUser

from .conftest import csrf_token

ROUTES = [
    ("GET", "/api/models"),
    ("POST", "/api/models"),
    ("GET", "/api/models/1"),
    ("PUT", "/api/models/1"),
    ("DELETE", "/api/models/1"),
    ("POST", "/api/models/1/train"),
]


@pytest.mark.parametrize("method, path", ROUTES)
def test_anonymous_requests_never_reach_service(container, method, path):
    spy = MagicMock()
    container.register("models", lambda: spy, override=True)

    with TestClient(create_app(container)) as client:
        token = csrf_token(client)
        response = client.request(method, path, json={"name": "x"}, headers={"X-XSRF-TOKEN": token})

    assert response.status_code == 401
    assert spy.method_calls == []


def test_crud(authorized_client):
    created = authorized_client.post("/api/models", json={"name": "bugs", "description": "bug triage"})
    assert created.status_code == 201
    model = created.json()
    assert model["name"] == "bugs"
    assert model["status"] == "new"

    listed = authorized_client.get("/api/models").json()
    assert [m["id"] for m in listed] == [model["id"]]

    updated = authorized_client.put(f"/api/models/{model['id']}", json={"name": "features"})
    assert updated.status_code == 200
    assert updated.json()["name"] == "features"
    assert updated.json()["description"] == "bug triage"

    assert authorized_client.get(f"/api/models/{model['id']}").json()["name"] == "features"

    deleted = authorized_client.delete(f"/api/models/{model['id']}")
    assert deleted.status_code == 204
    assert authorized_client.get(f"/api/models/{model['id']}").status_code == 404


def test_train(authorized_client):
    model = authorized_client.post("/api/models", json={"name": "bugs"}).json()

    response = authorized_client.post(f"/api/models/{model['id']}/train")

    assert response.status_code == 200
    assert response.json()["status"] == "training"
    assert response.json()["training_started_at"] is not None


def test_unknown_model_is_404(authorized_client):
    response = authorized_client.get("/api/models/999")

    assert response.status_code == 404
    assert response.json() == {"detail": "Not found", "status_code": 404}


def test_invalid_payload_is_422(authorized_client):
    response = authorized_client.post("/api/models", json={"name": ""})

    assert response.status_code == 422


def test_update_with_null_name_is_422(authorized_client):
    model = authorized_client.post("/api/models", json={"name": "bugs"}).json()

    response = authorized_client.put(f"/api/models/{model['id']}", json={"name": None})

    assert response.status_code == 422
    assert authorized_client.get(f"/api/models/{model['id']}").json()["name"] == "bugs"


def test_update_without_name_keeps_it(authorized_client):
    model = authorized_client.post("/api/models", json={"name": "bugs"}).json()

    response = authorized_client.put(f"/api/models/{model['id']}", json={"description": "triage"})

    assert response.status_code == 200
    assert response.json()["name"] == "bugs"
    assert response.json()["description"] == "triage"


def test_models_are_scoped_to_owner(authorized_client, create_session_cookie):
    model = authorized_client.post("/api/models", json={"name": "mine"}).json()

    authorized_client.cookies.clear()
    authorized_client.cookies.set("session", create_session_cookie(SessionUser(id=1, login="intruder")))
    authorized_client.headers["X-XSRF-TOKEN"] = csrf_token(authorized_client)

    assert authorized_client.get("/api/models").json() == []
    assert authorized_client.get(f"/api/models/{model['id']}").status_code == 404
    assert authorized_client.delete(f"/api/models/{model['id']}").status_code == 404

"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from cobrafacil.api.http_server import create_app
from cobrafacil.api.push_api import get_subscription_store
from cobrafacil.core.config import reload_config

ENDPOINT = "https://fcm.googleapis.com/fcm/send/abc"


@pytest.fixture
def client(store):
    app = create_app()
    app.dependency_overrides[get_subscription_store] = lambda: store
    return TestClient(app)


def subscribe_body(user_id="user-1"):
    return {
        "user_id": user_id,
        "subscription": {
            "endpoint": ENDPOINT,
            "expirationTime": None,
            "keys": {"p256dh": "p256", "auth": "secret"},
        },
    }


class TestInfoEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_vapid_key_missing(self, client):
        assert client.get("/push/vapid-public-key").status_code == 503

    def test_vapid_key_published(self, client, monkeypatch):
        monkeypatch.setenv("VAPID_PUBLIC_KEY", "BPublicKey")
        reload_config()
        response = client.get("/push/vapid-public-key")
        assert response.json() == {"publicKey": "BPublicKey"}


class TestSubscriptionEndpoints:
    def test_subscribe_and_status(self, client):
        response = client.post(
            "/push/subscriptions",
            json=subscribe_body(),
            headers={"User-Agent": "Mozilla/5.0 (Android) Mobile"},
        )
        assert response.status_code == 201
        assert response.json()["device_name"] == "Celular"

        status = client.get("/push/subscriptions/status", params={"user_id": "user-1", "endpoint": ENDPOINT})
        assert status.json()["is_subscribed"] is True

    def test_subscribe_without_keys(self, client):
        body = subscribe_body()
        del body["subscription"]["keys"]
        response = client.post("/push/subscriptions", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid subscription data"

    def test_unsubscribe(self, client):
        client.post("/push/subscriptions", json=subscribe_body())
        response = client.request("DELETE", "/push/subscriptions", json={"user_id": "user-1", "endpoint": ENDPOINT})
        assert response.json() == {"success": True, "removed": True}

        status = client.get("/push/subscriptions/status", params={"user_id": "user-1", "endpoint": ENDPOINT})
        assert status.json()["is_subscribed"] is False


class TestSendEndpoint:
    def test_requires_title_and_body(self, client):
        response = client.post("/push/send", json={"title": "Pagamento recebido"})
        assert response.status_code == 422

    def test_requires_vapid_keys(self, client):
        response = client.post("/push/send", json={"title": "t", "body": "b"})
        assert response.status_code == 503

    def test_send(self, client, monkeypatch):
        monkeypatch.setenv("VAPID_PUBLIC_KEY", "BPublicKey")
        monkeypatch.setenv("VAPID_PRIVATE_KEY", "private")
        reload_config()
        sent = []
        monkeypatch.setattr("cobrafacil.push.sender.webpush", lambda **kwargs: sent.append(kwargs))

        client.post("/push/subscriptions", json=subscribe_body())
        response = client.post("/push/send", json={
            "user_id": "user-1",
            "title": "Parcela vence hoje",
            "body": "R$150",
            "url": "/loans/42",
        })

        assert response.status_code == 200
        assert response.json()["sent"] == 1
        assert sent[0]["subscription_info"]["endpoint"] == ENDPOINT


class TestWorkerPreview:
    def test_preview_json_payload(self, client):
        response = client.post(
            "/worker/preview",
            content=b'{"title":"Pagamento recebido","data":{"url":"/a"},"url":"/b"}',
        )
        body = response.json()
        assert body["title"] == "Pagamento recebido"
        assert body["model"]["data"]["url"] == "/b"
        assert body["options"]["requireInteraction"] is True

    def test_preview_plain_text(self, client):
        response = client.post("/worker/preview", content=b"Parcela atrasada")
        assert response.json()["model"]["body"] == "Parcela atrasada"

    def test_preview_empty_body_gives_defaults(self, client):
        response = client.post("/worker/preview")
        assert response.json()["model"]["title"] == "CobraFácil"

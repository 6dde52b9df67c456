"""Tests for the ASGI webhook app."""

import json

import pytest
from starlette.testclient import TestClient

from event_notification_sdk import Config, NotificationDispatcher
from event_notification_sdk.middleware.asgi import create_webhook_app

from conftest import KEY_ID, KEY_URL, TOKEN_URL


@pytest.fixture
def client(sample_config):
    app = create_webhook_app(NotificationDispatcher(), sample_config, "PRODUCTION")
    return TestClient(app)


class TestReceiveNotification:
    """Tests for POST /webhook."""

    def test_verified_notification(self, client, mock_api, message, signed_header, key_response):
        """Signed notification returns 204."""
        mock_api.post(TOKEN_URL).respond(json={"access_token": "abcde"})
        mock_api.get(f"{KEY_URL}{KEY_ID}").respond(json=key_response)

        response = client.post(
            "/webhook",
            content=json.dumps(message, indent=2),
            headers={"x-ebay-signature": signed_header, "content-type": "application/json"},
        )

        assert response.status_code == 204

    def test_missing_signature(self, client, mock_api, message):
        """Request without signature header returns 412."""
        response = client.post("/webhook", json=message)

        assert response.status_code == 412
        assert response.text == "Signature is missing"
        assert not mock_api.calls.called

    def test_invalid_json(self, client, mock_api, signed_header):
        response = client.post(
            "/webhook",
            content="{not json",
            headers={"x-ebay-signature": signed_header},
        )

        assert response.status_code == 400

    def test_signature_mismatch(self, client, mock_api, message, signed_header, key_response):
        """Modified payload returns 412."""
        mock_api.post(TOKEN_URL).respond(json={"access_token": "abcde"})
        mock_api.get(f"{KEY_URL}{KEY_ID}").respond(json=key_response)
        message["metadata"]["topic"] = "PRIORITY_LISTING_REVISION"

        response = client.post(
            "/webhook",
            content=json.dumps(message),
            headers={"x-ebay-signature": signed_header},
        )

        assert response.status_code == 412

    def test_upstream_failure(self, client, mock_api, message, signed_header):
        """Key service failure returns 500."""
        mock_api.post(TOKEN_URL).respond(json={"access_token": "abcde"})
        mock_api.get(f"{KEY_URL}{KEY_ID}").respond(status_code=503, json={})

        response = client.post(
            "/webhook",
            content=json.dumps(message),
            headers={"x-ebay-signature": signed_header},
        )

        assert response.status_code == 500


class TestAnswerChallenge:
    """Tests for GET /webhook."""

    def test_challenge_response(self, client):
        response = client.get("/webhook", params={"challenge_code": "71745723-d031-455c-bfa5-f90d11b4f20a"})

        assert response.status_code == 200
        assert response.json() == {
            "challengeResponse": "048de9ffd0e35021fefc0388d5c52e0f475324f582f3778ca81a53354ccbbc97"
        }

    def test_missing_challenge_code(self, client):
        response = client.get("/webhook")
        assert response.status_code == 500

    def test_missing_endpoint_config(self):
        app = create_webhook_app(NotificationDispatcher(), Config(verification_token="token"), "PRODUCTION")
        client = TestClient(app)

        response = client.get("/webhook", params={"challenge_code": "code"})

        assert response.status_code == 500

    def test_custom_path(self, sample_config):
        app = create_webhook_app(NotificationDispatcher(), sample_config, "PRODUCTION", path="/ebay/events")
        client = TestClient(app)

        assert client.get("/ebay/events", params={"challenge_code": "code"}).status_code == 200
        assert client.get("/webhook", params={"challenge_code": "code"}).status_code == 404

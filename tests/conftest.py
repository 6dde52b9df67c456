"""Shared fixtures: credentials, signing keys and signed notifications."""

import base64
import json

import pytest
import respx
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from event_notification_sdk import Config, EnvironmentConfig, canonical_message
from event_notification_sdk.constants import KEY_END, KEY_START

TOKEN_URL = "https://api.ebay.com/identity/v1/oauth2/token"
SANDBOX_TOKEN_URL = "https://api.sandbox.ebay.com/identity/v1/oauth2/token"
KEY_URL = "https://api.ebay.com/commerce/notification/v1/public_key/"
SANDBOX_KEY_URL = "https://api.sandbox.ebay.com/commerce/notification/v1/public_key/"

KEY_ID = "99345c4b6ee3ec52d0aab9ca4d03a93e"


def glued_pem(public_key) -> str:
    """PEM text with the delimiters glued to the body, as the key service sends it."""
    pem = public_key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode().strip()
    return pem.replace(KEY_START + "\n", KEY_START).replace("\n" + KEY_END, KEY_END)


def sign(private_key, message) -> str:
    """Base64 ECDSA-SHA1 signature over the canonical message bytes."""
    signature = private_key.sign(canonical_message(message), ec.ECDSA(hashes.SHA1()))
    return base64.b64encode(signature).decode()


def signature_header(kid: str, signature: str) -> str:
    envelope = {"alg": "ECDSA", "kid": kid, "signature": signature, "digest": "SHA1"}
    return base64.b64encode(json.dumps(envelope).encode()).decode()


@pytest.fixture
def sample_config():
    return Config(
        environments={
            "SANDBOX": EnvironmentConfig(
                client_id="clientId",
                client_secret="clientSecret",
                dev_id="devId",
                redirect_uri="redirectUri",
                base_url="api.sandbox.ebay.com",
            ),
            "PRODUCTION": EnvironmentConfig(
                client_id="clientId",
                client_secret="clientSecret",
                dev_id="devId",
                redirect_uri="redirectUri",
                base_url="api.ebay.com",
            ),
        },
        endpoint="http://www.testendpoint.com/webhook",
        verification_token="71745723-d031-455c-bfa5-f90d11b4f20a",
    )


@pytest.fixture
def signing_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def message():
    return {
        "metadata": {
            "topic": "MARKETPLACE_ACCOUNT_DELETION",
            "schemaVersion": "1.0",
            "deprecated": False,
        },
        "notification": {
            "notificationId": "49feeaeb-4982-42d9-a377-9645b8479411_33f7e043-fed8-442b-9d44-791923bd9a6d",
            "eventDate": "2021-03-19T20:43:59.462Z",
            "publishDate": "2021-03-19T20:43:59.679Z",
            "publishAttemptCount": 1,
            "data": {
                "username": "test_user",
                "userId": "ma8vp1jySJC",
                "eiasToken": "nY+sHZ2PrBmdj6wVnY+sEZ2PrA2dj6wJnY+gAZGEpwmdj6x9nY+seQ==",
            },
        },
    }


@pytest.fixture
def signed_header(signing_key, message):
    return signature_header(KEY_ID, sign(signing_key, message))


@pytest.fixture
def key_response(signing_key):
    return {
        "algorithm": "ECDSA",
        "digest": "SHA1",
        "key": glued_pem(signing_key.public_key()),
    }


@pytest.fixture
def mock_api():
    """Create a respx mock for the identity and key services."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock

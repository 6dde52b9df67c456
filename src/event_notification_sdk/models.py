"""
Data models for notification verification.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .constants import ENVIRONMENTS


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Application credentials for one deployment environment.

    Attributes:
        client_id: OAuth client id (App ID) from the developer portal
        client_secret: OAuth client secret (Cert ID)
        dev_id: Developer id
        redirect_uri: Redirect URI (RuName), unused by client credentials
        base_url: API host, e.g. "api.ebay.com" or "api.sandbox.ebay.com"
    """
    client_id: str = ""
    client_secret: str = ""
    dev_id: str = ""
    redirect_uri: str = ""
    base_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EnvironmentConfig:
        return cls(
            client_id=data.get("clientId", ""),
            client_secret=data.get("clientSecret", ""),
            dev_id=data.get("devId", ""),
            redirect_uri=data.get("redirectUri", ""),
            base_url=data.get("baseUrl", ""),
        )


@dataclass
class Config:
    """
    Root configuration for processing notifications.

    Attributes:
        environments: Credentials keyed by environment name (SANDBOX, PRODUCTION)
        endpoint: Public URL of the webhook endpoint
        verification_token: Token registered together with the endpoint
        environment: Environment selected for the current call, set by the
            dispatcher before verification
    """
    environments: dict[str, EnvironmentConfig] = field(default_factory=dict)
    endpoint: str = ""
    verification_token: str = ""
    environment: str | None = None

    def environment_config(self, name: str | None = None) -> EnvironmentConfig | None:
        """Return credentials for ``name``, or for the selected environment."""
        return self.environments.get(name or self.environment or "")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """
        Build a Config from the JSON credential file layout.

        Example:
            >>> Config.from_dict({
            ...     "PRODUCTION": {"clientId": "id", "clientSecret": "secret"},
            ...     "endpoint": "https://example.com/webhook",
            ...     "verificationToken": "token",
            ... })
        """
        environments = {
            name: EnvironmentConfig.from_dict(data[name])
            for name in ENVIRONMENTS
            if isinstance(data.get(name), Mapping)
        }
        return cls(
            environments=environments,
            endpoint=data.get("endpoint", ""),
            verification_token=data.get("verificationToken", ""),
            environment=data.get("environment"),
        )


def load_config(path: str | Path) -> Config:
    """Load a Config from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return Config.from_dict(json.load(f))


@dataclass(frozen=True)
class SignatureEnvelope:
    """
    Decoded contents of the signature header.

    Attributes:
        kid: Id of the public key that produced the signature
        signature: Base64-encoded signature bytes
        alg: Signature algorithm, if the header names one
        digest: Digest algorithm, if the header names one
    """
    kid: str
    signature: str
    alg: str | None = None
    digest: str | None = None


@dataclass(frozen=True)
class PublicKey:
    """
    Public key record returned by the key service.

    Attributes:
        key_id: Id the key was requested by
        key: PEM text; delimiters may be glued to the key body
        algorithm: Key algorithm reported by the service (e.g. ECDSA)
        digest: Digest reported by the service (e.g. SHA1)
    """
    key_id: str
    key: str
    algorithm: str | None = None
    digest: str | None = None


@dataclass(frozen=True)
class AppToken:
    """
    Application access token from the identity service.

    Attributes:
        access_token: Bearer credential
        token_type: Token type reported by the service
        expires_in: Lifetime in seconds
    """
    access_token: str
    token_type: str | None = None
    expires_in: int | None = None

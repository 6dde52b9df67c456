"""
Application token acquisition via the OAuth client credentials grant.
"""

from __future__ import annotations

import httpx
import structlog

from .constants import (
    API_HOSTS,
    CLIENT_CREDENTIALS_SCOPE,
    DEFAULT_TIMEOUT_S,
    IDENTITY_TOKEN_PATH,
    Environment,
)
from .errors import ConfigurationError, UpstreamError
from .models import AppToken, EnvironmentConfig

logger = structlog.get_logger(__name__)


def token_url(environment: str, env_config: EnvironmentConfig) -> str:
    """Identity service token URL for ``environment``."""
    host = env_config.base_url or API_HOSTS.get(environment, API_HOSTS[Environment.PRODUCTION])
    if "://" not in host:
        host = f"https://{host}"
    return f"{host.rstrip('/')}{IDENTITY_TOKEN_PATH}"


class TokenProvider:
    """
    Fetches application access tokens from the identity service.

    Tokens are not cached: every call makes one request, so a revoked token
    is never reused.

    Args:
        timeout_s: Request timeout in seconds. Default: 5.0
    """

    def __init__(self, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.timeout_s = timeout_s

    async def get_app_token(
        self,
        environment: str,
        env_config: EnvironmentConfig | None,
    ) -> AppToken:
        """
        Exchange the environment's client credentials for an access token.

        Raises:
            ConfigurationError: If the environment has no client id or secret
            UpstreamError: If the identity service rejects the request or is
                unreachable
        """
        if env_config is None:
            raise ConfigurationError(
                f"Environment configuration for {environment} is missing."
            )
        if not env_config.client_id or not env_config.client_secret:
            raise ConfigurationError(
                f"Client credentials for {environment} are missing."
            )

        url = token_url(environment, env_config)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.post(
                    url,
                    data={
                        "grant_type": "client_credentials",
                        "scope": CLIENT_CREDENTIALS_SCOPE,
                    },
                    auth=(env_config.client_id, env_config.client_secret),
                )
        except httpx.HTTPError as e:
            logger.error("app_token_failed", environment=environment, url=url, error=str(e))
            raise UpstreamError(f"Token request to {url} failed: {e}", url=url) from e

        return self._parse_response(response, environment, url)

    def _parse_response(
        self,
        response: httpx.Response,
        environment: str,
        url: str,
    ) -> AppToken:
        if response.status_code != 200:
            logger.error(
                "app_token_failed",
                environment=environment,
                url=url,
                status_code=response.status_code,
            )
            raise UpstreamError(
                f"Token request failed with {response.status_code} for {url}",
                status_code=response.status_code,
                url=url,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid token response from {url}", url=url) from e

        if not isinstance(data, dict) or not data.get("access_token"):
            raise UpstreamError(f"Token response from {url} has no access_token", url=url)

        return AppToken(
            access_token=data["access_token"],
            token_type=data.get("token_type"),
            expires_in=data.get("expires_in"),
        )

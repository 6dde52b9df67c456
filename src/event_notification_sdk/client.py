"""
Public key resolution against the notification key service.
"""

from __future__ import annotations

import httpx
import structlog

from .auth import TokenProvider
from .cache import KeyCache
from .constants import (
    APPLICATION_JSON,
    BEARER,
    DEFAULT_TIMEOUT_S,
    NOTIFICATION_API_ENDPOINTS,
    Environment,
)
from .errors import NotificationError, UpstreamError
from .models import Config, PublicKey

logger = structlog.get_logger(__name__)


def public_key_url(environment: str | None, key_id: str) -> str:
    """Key service URL for ``key_id``; anything but SANDBOX resolves to production."""
    if environment == Environment.SANDBOX:
        base = NOTIFICATION_API_ENDPOINTS[Environment.SANDBOX]
    else:
        base = NOTIFICATION_API_ENDPOINTS[Environment.PRODUCTION]
    return f"{base}{key_id}"


class KeyResolver:
    """
    Resolves signing keys, consulting the cache before the key service.

    On a miss a fresh application token is fetched, the key is requested with
    it and the result is cached under its key id. No retries are made.

    Args:
        cache: Key cache shared by all calls on this resolver
        token_provider: Source of application tokens
        timeout_s: Key service request timeout in seconds. Default: 5.0

    Example:
        >>> resolver = KeyResolver(KeyCache(), TokenProvider())
        >>> key = await resolver.get_public_key("a1b2c3", config)
        >>> key.key
        '-----BEGIN PUBLIC KEY-----MFkw...-----END PUBLIC KEY-----'
    """

    def __init__(
        self,
        cache: KeyCache,
        token_provider: TokenProvider,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ):
        self.cache = cache
        self.token_provider = token_provider
        self.timeout_s = timeout_s

    async def get_public_key(self, key_id: str, config: Config) -> PublicKey:
        """
        Return the public key for ``key_id``.

        Raises:
            UpstreamError: If the token or key request fails; always carries
                ``key_id`` and chains the underlying error
        """
        cached = self.cache.get(key_id)
        if cached is not None:
            logger.debug("public_key_cache_hit", key_id=key_id)
            return cached

        environment = config.environment or Environment.PRODUCTION
        try:
            token = await self.token_provider.get_app_token(
                environment,
                config.environment_config(environment),
            )
        except NotificationError as e:
            logger.error("public_key_fetch_failed", key_id=key_id, step="token", error=str(e))
            raise UpstreamError(
                f"Public key retrieval failed for {key_id}: {e}",
                key_id=key_id,
                status_code=getattr(e, "status_code", None),
                url=getattr(e, "url", None),
            ) from e

        url = public_key_url(environment, key_id)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.get(
                    url,
                    headers={
                        "Authorization": f"{BEARER}{token.access_token}",
                        "Content-Type": APPLICATION_JSON,
                    },
                )
        except httpx.HTTPError as e:
            logger.error("public_key_fetch_failed", key_id=key_id, url=url, error=str(e))
            raise UpstreamError(
                f"Public key retrieval failed for {url}: {e}",
                key_id=key_id,
                url=url,
            ) from e

        record = self._parse_response(response, key_id, url)
        self.cache.put(key_id, record)
        logger.info("public_key_fetched", key_id=key_id, algorithm=record.algorithm)
        return record

    def _parse_response(self, response: httpx.Response, key_id: str, url: str) -> PublicKey:
        """Parse key service response into a PublicKey."""
        if response.status_code != 200:
            logger.error(
                "public_key_fetch_failed",
                key_id=key_id,
                url=url,
                status_code=response.status_code,
            )
            raise UpstreamError(
                f"Public key retrieval failed with {response.status_code} for {url}",
                key_id=key_id,
                status_code=response.status_code,
                url=url,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Invalid public key response for {key_id}",
                key_id=key_id,
                url=url,
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("key"), str):
            raise UpstreamError(
                f"Public key response for {key_id} has no key",
                key_id=key_id,
                url=url,
            )

        return PublicKey(
            key_id=key_id,
            key=data["key"],
            algorithm=data.get("algorithm"),
            digest=data.get("digest"),
        )

"""
Challenge response for endpoint ownership validation.
"""

from __future__ import annotations

import hashlib

from .errors import ValidationError
from .models import Config


def generate_challenge_response(challenge_code: str, config: Config | None) -> str:
    """
    Compute the response to an endpoint validation challenge.

    SHA-256 over the challenge code, verification token and endpoint, in that
    order, returned as lowercase hex.

    Raises:
        ValidationError: If the challenge code, config, endpoint or
            verification token is missing

    Examples:
        >>> config = Config(endpoint="https://example.com/webhook", verification_token="token")
        >>> len(generate_challenge_response("code", config))
        64
    """
    if not challenge_code:
        raise ValidationError('The "challengeCode" is required.')
    if not config:
        raise ValidationError("Please provide the config.")
    if not config.endpoint:
        raise ValidationError('The "endpoint" is required.')
    if not config.verification_token:
        raise ValidationError('The "verificationToken" is required.')

    digest = hashlib.sha256()
    digest.update(challenge_code.encode("utf-8"))
    digest.update(config.verification_token.encode("utf-8"))
    digest.update(config.endpoint.encode("utf-8"))
    return digest.hexdigest()

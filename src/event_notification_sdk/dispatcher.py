"""
Entry point for verifying and dispatching notifications.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from .auth import TokenProvider
from .cache import KeyCache
from .challenge import generate_challenge_response
from .client import KeyResolver
from .constants import DEFAULT_TIMEOUT_S, ENVIRONMENTS, ResultCode
from .errors import ValidationError
from .models import Config
from .processors import ProcessorRegistry, message_topic
from .signature import SignatureVerifier

logger = structlog.get_logger(__name__)


def _check_inputs(
    message: Any,
    signature: Any,
    config: Any,
    environment: Any,
) -> ValidationError | None:
    """
    Check inputs in order and return the first failure.

    Returns None if the inputs are valid for verification, or a
    ValidationError describing the first missing input.
    """
    if (
        not isinstance(message, Mapping)
        or message.get("metadata") is None
        or message.get("notification") is None
    ):
        return ValidationError("Please provide the message.")

    if not signature or not isinstance(signature, str):
        return ValidationError("Please provide the signature.")

    if not isinstance(config, Config):
        return ValidationError("Please provide the config.")

    if not isinstance(environment, str) or environment not in ENVIRONMENTS:
        return ValidationError("Please provide the environment.")

    env_config = config.environment_config(environment)
    if env_config is None:
        return ValidationError(f"Environment configuration for {environment} is missing.")

    if not env_config.client_id:
        return ValidationError("Please provide the Client ID.")

    if not env_config.client_secret:
        return ValidationError("Please provide the Client Secret.")

    return None


class NotificationDispatcher:
    """
    Verifies inbound notifications and hands them to topic processors.

    Each dispatcher owns its own key cache, so independent dispatchers never
    share keys. Collaborators can be injected for testing or customization.

    Args:
        cache: Public key cache. Default: a new KeyCache of 100 entries
        token_provider: Application token source. Default: TokenProvider
        resolver: Public key resolver. Default: built from cache and token_provider
        verifier: Signature verifier. Default: built from resolver
        processors: Topic processors. Default: built-in processors
        timeout_s: Timeout for identity and key service requests. Default: 5.0

    Example:
        >>> dispatcher = NotificationDispatcher()
        >>> status = await dispatcher.process(
        ...     payload, request.headers["x-ebay-signature"], config, "PRODUCTION"
        ... )
        >>> status
        <ResultCode.NO_CONTENT: 204>
    """

    def __init__(
        self,
        cache: KeyCache | None = None,
        token_provider: TokenProvider | None = None,
        resolver: KeyResolver | None = None,
        verifier: SignatureVerifier | None = None,
        processors: ProcessorRegistry | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ):
        self.cache = cache if cache is not None else KeyCache()
        self.token_provider = token_provider or TokenProvider(timeout_s=timeout_s)
        self.resolver = resolver or KeyResolver(
            self.cache, self.token_provider, timeout_s=timeout_s
        )
        self.verifier = verifier or SignatureVerifier(self.resolver)
        self.processors = processors or ProcessorRegistry()

    async def process(
        self,
        message: Mapping[str, Any],
        signature: str,
        config: Config,
        environment: str,
    ) -> ResultCode:
        """
        Verify ``message`` and dispatch it to the processor for its topic.

        Never raises: every failure is logged and reported as a result code.

        Args:
            message: Parsed notification body, with keys in received order
            signature: Value of the x-ebay-signature header
            config: Credentials and endpoint settings
            environment: SANDBOX or PRODUCTION

        Returns:
            NO_CONTENT if verified and dispatched, PRECONDITION_FAILED if the
            signature does not match, INTERNAL_SERVER_ERROR otherwise
        """
        error = _check_inputs(message, signature, config, environment)
        if error is not None:
            logger.error("validation_failed", error=str(error))
            return ResultCode.INTERNAL_SERVER_ERROR

        config.environment = environment

        try:
            verified = await self.verifier.verify(message, signature, config)
        except Exception as e:
            logger.error(
                "verification_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return ResultCode.INTERNAL_SERVER_ERROR

        if not verified:
            return ResultCode.PRECONDITION_FAILED

        self._dispatch(message)
        return ResultCode.NO_CONTENT

    def _dispatch(self, message: Mapping[str, Any]) -> None:
        """Run the topic processor; its failures do not change the result."""
        topic = message_topic(message)
        try:
            self.processors.get(topic).process(message)
        except Exception:
            logger.exception("processor_failed", topic=topic)
            return
        logger.info("message_dispatched", topic=topic)

    def validate_endpoint(self, challenge_code: str, config: Config) -> str:
        """
        Compute the challenge response for endpoint validation.

        Raises:
            ValidationError: If the challenge code, endpoint or verification
                token is missing
        """
        try:
            return generate_challenge_response(challenge_code, config)
        except ValidationError as e:
            logger.error("endpoint_validation_failed", error=str(e))
            raise

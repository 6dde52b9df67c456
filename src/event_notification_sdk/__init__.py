"""
Event Notification SDK for Python

Verify signed marketplace event notifications and dispatch them to topic
processors.
"""

from .auth import TokenProvider
from .cache import KeyCache
from .challenge import generate_challenge_response
from .client import KeyResolver
from .constants import Environment, ResultCode, Topic, SIGNATURE_HEADER
from .dispatcher import NotificationDispatcher
from .errors import (
    ConfigurationError,
    MalformedSignatureError,
    NotificationError,
    UpstreamError,
    ValidationError,
    VerificationError,
)
from .models import (
    AppToken,
    Config,
    EnvironmentConfig,
    PublicKey,
    SignatureEnvelope,
    load_config,
)
from .processors import MessageProcessor, ProcessorRegistry
from .signature import SignatureVerifier, canonical_message, decode_signature_header

__version__ = "0.1.0"

__all__ = [
    "AppToken",
    "Config",
    "ConfigurationError",
    "Environment",
    "EnvironmentConfig",
    "KeyCache",
    "KeyResolver",
    "MalformedSignatureError",
    "MessageProcessor",
    "NotificationDispatcher",
    "NotificationError",
    "ProcessorRegistry",
    "PublicKey",
    "ResultCode",
    "SIGNATURE_HEADER",
    "SignatureEnvelope",
    "SignatureVerifier",
    "Topic",
    "TokenProvider",
    "UpstreamError",
    "ValidationError",
    "VerificationError",
    "canonical_message",
    "decode_signature_header",
    "generate_challenge_response",
    "load_config",
]

# Webhook app import - optional, requires starlette
try:
    from .middleware.asgi import create_webhook_app
    __all__.append("create_webhook_app")
except ImportError:
    pass

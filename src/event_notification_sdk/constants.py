"""
Constants shared across the notification SDK.
"""

from enum import IntEnum


class Environment:
    """Deployment targets with distinct credentials and service hosts."""
    SANDBOX = "SANDBOX"
    PRODUCTION = "PRODUCTION"


ENVIRONMENTS = frozenset({Environment.SANDBOX, Environment.PRODUCTION})


class ResultCode(IntEnum):
    """Outcome of processing a notification, as an HTTP status code."""
    NO_CONTENT = 204
    PRECONDITION_FAILED = 412
    INTERNAL_SERVER_ERROR = 500


# Header carrying the base64 signature envelope
SIGNATURE_HEADER = "x-ebay-signature"

# Identity service
API_HOSTS = {
    Environment.SANDBOX: "api.sandbox.ebay.com",
    Environment.PRODUCTION: "api.ebay.com",
}
IDENTITY_TOKEN_PATH = "/identity/v1/oauth2/token"
CLIENT_CREDENTIALS_SCOPE = "https://api.ebay.com/oauth/api_scope"

# Key distribution service, key id is appended
NOTIFICATION_API_ENDPOINTS = {
    Environment.SANDBOX: "https://api.sandbox.ebay.com/commerce/notification/v1/public_key/",
    Environment.PRODUCTION: "https://api.ebay.com/commerce/notification/v1/public_key/",
}

BEARER = "bearer "
APPLICATION_JSON = "application/json"

KEY_START = "-----BEGIN PUBLIC KEY-----"
KEY_END = "-----END PUBLIC KEY-----"

DEFAULT_CACHE_SIZE = 100
DEFAULT_TIMEOUT_S = 5.0


class Topic:
    """Notification topics with built-in processors."""
    MARKETPLACE_ACCOUNT_DELETION = "MARKETPLACE_ACCOUNT_DELETION"
    PRIORITY_LISTING_REVISION = "PRIORITY_LISTING_REVISION"

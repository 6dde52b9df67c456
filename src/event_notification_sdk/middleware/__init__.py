"""
Webhook endpoint for ASGI frameworks.

Re-exports the app factory for convenient imports:
    from event_notification_sdk.middleware import create_webhook_app
"""

__all__: list[str] = []

# ASGI endpoint (FastAPI, Starlette)
try:
    from .asgi import create_webhook_app
    __all__.append("create_webhook_app")
except ImportError:
    pass

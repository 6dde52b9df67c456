"""
FastAPI demo receiving event notifications.

Usage:
    # Install dependencies
    pip install -e ".[asgi,fastapi]"

    # Run the server
    uvicorn examples.fastapi_demo:app --port 8080 --reload

    # Or directly
    python examples/fastapi_demo.py

Test with curl:
    # Endpoint validation challenge
    curl "http://localhost:8080/webhook?challenge_code=abc123"

    # Notifications must carry a valid x-ebay-signature header; unsigned
    # requests are answered with 412.
    curl -X POST http://localhost:8080/webhook -H "content-type: application/json" -d '{}'

Environment variables:
    EVENT_NOTIFICATION_CONFIG - Path to the JSON credential file (default: config.json)
    EVENT_NOTIFICATION_ENVIRONMENT - SANDBOX or PRODUCTION (default: PRODUCTION)
    PORT - Override port (default: 8080)
"""

import os

import structlog
from fastapi import FastAPI

from event_notification_sdk import NotificationDispatcher, load_config
from event_notification_sdk.middleware import create_webhook_app

# Configuration from environment
CONFIG_PATH = os.getenv("EVENT_NOTIFICATION_CONFIG", "config.json")
ENVIRONMENT = os.getenv("EVENT_NOTIFICATION_ENVIRONMENT", "PRODUCTION")
PORT = int(os.getenv("PORT", "8080"))

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
)

app = FastAPI(
    title="Event Notification Demo",
    description="Receives and verifies signed event notifications",
    version="0.1.0",
)

app.mount(
    "/",
    create_webhook_app(NotificationDispatcher(), load_config(CONFIG_PATH), ENVIRONMENT),
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)

"""
ASGI webhook endpoint for notifications (Starlette/FastAPI).
"""

from __future__ import annotations

import json

import structlog
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from ..constants import SIGNATURE_HEADER, ResultCode
from ..dispatcher import NotificationDispatcher
from ..errors import ValidationError
from ..models import Config

logger = structlog.get_logger(__name__)


def create_webhook_app(
    dispatcher: NotificationDispatcher,
    config: Config,
    environment: str,
    path: str = "/webhook",
) -> Starlette:
    """
    Build an ASGI app serving the notification webhook.

    POST ``path`` verifies and dispatches a notification and responds with
    the dispatcher's result code. GET ``path?challenge_code=...`` answers the
    endpoint validation challenge.

    Args:
        dispatcher: Dispatcher that verifies and processes notifications
        config: Credentials and endpoint settings
        environment: SANDBOX or PRODUCTION
        path: Route of the webhook. Default: /webhook

    Example (FastAPI):
        >>> from fastapi import FastAPI
        >>> from event_notification_sdk.middleware.asgi import create_webhook_app
        >>>
        >>> app = FastAPI()
        >>> app.mount("/ebay", create_webhook_app(NotificationDispatcher(), config, "PRODUCTION"))
    """

    async def receive_notification(request: Request) -> Response:
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            return PlainTextResponse(
                "Signature is missing",
                status_code=ResultCode.PRECONDITION_FAILED,
            )

        body = await request.body()
        try:
            message = json.loads(body)
        except ValueError:
            return PlainTextResponse("Invalid JSON body", status_code=400)

        status = await dispatcher.process(message, signature, config, environment)
        if status == ResultCode.PRECONDITION_FAILED:
            logger.warning("signature_rejected", path=request.url.path)
        return Response(status_code=int(status))

    async def answer_challenge(request: Request) -> Response:
        challenge_code = request.query_params.get("challenge_code")
        if not challenge_code:
            return Response(status_code=ResultCode.INTERNAL_SERVER_ERROR)

        try:
            challenge_response = dispatcher.validate_endpoint(challenge_code, config)
        except ValidationError:
            return Response(status_code=ResultCode.INTERNAL_SERVER_ERROR)

        return JSONResponse({"challengeResponse": challenge_response})

    return Starlette(
        routes=[
            Route(path, receive_notification, methods=["POST"]),
            Route(path, answer_challenge, methods=["GET"]),
        ]
    )

"""Facebook webhook endpoints.

GET answers the subscription handshake, POST hands the raw body to the
Messenger core and returns its acknowledgment. Both always answer 200; the
outcome is carried in the body.
"""

from functools import lru_cache

import logfire
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from src.bot import create_messenger
from src.config import get_settings
from src.services.messenger import Messenger

router = APIRouter()


@lru_cache()
def get_messenger() -> Messenger:
    """Get the process-wide Messenger, built and registered once."""
    return create_messenger(get_settings())


@router.get("")
async def verify_webhook(
    request: Request, messenger: Messenger = Depends(get_messenger)
):
    """Facebook webhook verification endpoint."""
    token = request.query_params.get("hub.verify_token", "")
    challenge = request.query_params.get("hub.challenge", "")
    return PlainTextResponse(messenger.verify_webhook(token, challenge))


@router.post("")
async def handle_webhook(
    request: Request, messenger: Messenger = Depends(get_messenger)
):
    """Handle incoming Facebook Messenger webhook events."""
    body = await request.body()
    with logfire.span(
        "messenger webhook",
        correlation_id=getattr(request.state, "correlation_id", None),
        body_size=len(body),
    ):
        return await messenger.handle_webhook(body)

"""Example Messenger bot: greets every sender by first name.

Builds a ``Messenger`` from application settings and registers:
- a page token resolver returning the configured page access token
- a text handler replying "Hello, <first name>!"
- a delivery handler logging the read watermark
"""

import httpx
import logfire

from src.config import Settings
from src.models.messenger import Delivery, Message
from src.services.messaging_protocol import MessengerResponse
from src.services.messenger import Messenger, PageTokenError


def greeting(first_name: str | None) -> str:
    return f"Hello, {first_name or ''}!"


def create_messenger(settings: Settings) -> Messenger:
    """Create the Messenger client and register the bot's handlers."""
    messenger = Messenger(
        verify_token=settings.facebook_verify_token,
        config=settings.graph_api_config(),
    )

    @messenger.on_page_token
    async def resolve_page_token(page_id: int) -> str:
        if not settings.facebook_page_access_token:
            raise PageTokenError(f"no page access token configured for page {page_id}")
        return settings.facebook_page_access_token

    @messenger.on_message
    async def say_hello(
        m: Messenger, message: Message, response: MessengerResponse
    ) -> None:
        logfire.info(
            "Message received",
            text=message.text,
            sent_at=message.time.isoformat(),
            sender_id=message.sender.id,
        )

        first_name = None
        try:
            profile = await m.profile_by_id(message.page_token, message.sender.id)
            first_name = profile.first_name
        except (httpx.HTTPError, ValueError) as e:
            logfire.error(
                "Profile lookup failed, greeting without a name",
                sender_id=message.sender.id,
                error=str(e),
                error_type=type(e).__name__,
            )

        await response.text(greeting(first_name))

    @messenger.on_delivery
    async def log_delivery(
        m: Messenger, delivery: Delivery, response: MessengerResponse
    ) -> None:
        logfire.info(
            "Messages delivered",
            watermark=delivery.watermark_time.isoformat(),
            recipient_id=response.recipient_id,
            mids=delivery.mids,
        )

    return messenger

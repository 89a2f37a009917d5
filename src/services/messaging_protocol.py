"""Callback protocols and the per-event response handle.

The Messenger core is decoupled from the code that reacts to events through
three callback slots:

- a page token resolver, mapping a page ID to its access token
- a text message handler
- a delivery receipt handler

Handlers receive a ``MessengerResponse`` bound to the sender of the event,
which they use to reply. Replies are new outbound calls and have nothing to
do with the webhook acknowledgment.
"""

from typing import TYPE_CHECKING, Protocol

import httpx

from src.models.config_models import GraphAPIConfig
from src.models.messenger import Delivery, Message
from src.services.facebook_service import send_message

if TYPE_CHECKING:
    from src.services.messenger import Messenger


class PageTokenResolver(Protocol):
    """Resolve the access token of a page.

    Must raise to signal failure. Called once per classified event, so any
    caching belongs in the implementation.
    """

    async def __call__(self, page_id: int) -> str: ...


class MessageHandler(Protocol):
    """React to a received text message."""

    async def __call__(
        self, messenger: "Messenger", message: Message, response: "MessengerResponse"
    ) -> None: ...


class DeliveryHandler(Protocol):
    """React to a delivery receipt."""

    async def __call__(
        self, messenger: "Messenger", delivery: Delivery, response: "MessengerResponse"
    ) -> None: ...


class MessengerResponse:
    """Reply channel bound to one recipient and one page token.

    Not enforced as single use: every call to ``text`` sends a new message.

    Example:
        >>> response = MessengerResponse(recipient_id=7, token="TOK")
        >>> await response.text("Hello!")
    """

    def __init__(
        self,
        recipient_id: int,
        token: str,
        config: GraphAPIConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.recipient_id = recipient_id
        self._token = token
        self._config = config or GraphAPIConfig()
        self._client = client

    async def text(self, text: str) -> None:
        """Send ``text`` to the bound recipient.

        Raises:
            httpx.HTTPStatusError: Send API rejected the message
            httpx.RequestError: the request could not be completed
        """
        await send_message(
            config=self._config,
            page_access_token=self._token,
            recipient_id=self.recipient_id,
            text=text,
            client=self._client,
        )

    def __repr__(self) -> str:
        return f"MessengerResponse(recipient_id={self.recipient_id!r})"

"""Messenger webhook core: handshake, payload decoding and event dispatch.

A ``Messenger`` owns the verify token, the Graph API configuration and
three callback slots. Slots are filled once at startup through
``on_page_token``, ``on_message`` and ``on_delivery``; last registration
wins. Dispatch only reads them, so one instance can serve concurrent
requests.
"""

import httpx
import logfire
from pydantic import ValidationError

from src.constants import (
    ACK_NOT_OK,
    ACK_OK,
    INCORRECT_VERIFY_TOKEN_MESSAGE,
    PAGE_OBJECT,
)
from src.logging_config import mask_pii
from src.models.config_models import GraphAPIConfig
from src.models.messenger import (
    EventKind,
    Message,
    MessengerProfile,
    WebhookPayload,
)
from src.services.event_classifier import classify_event
from src.services.facebook_service import get_user_profile
from src.services.messaging_protocol import (
    DeliveryHandler,
    MessageHandler,
    MessengerResponse,
    PageTokenResolver,
)


class MessengerError(Exception):
    """Base error of the Messenger core."""


class PageTokenError(MessengerError):
    """Raised when a page access token cannot be resolved."""


class Messenger:
    """Client managing webhook traffic with the Messenger Platform.

    Example:
        >>> messenger = Messenger(verify_token="secret")
        >>> @messenger.on_page_token
        ... async def resolve(page_id: int) -> str:
        ...     return "PAGE_TOKEN"
        >>> @messenger.on_message
        ... async def echo(m, message, response):
        ...     await response.text(message.text)
    """

    def __init__(
        self,
        verify_token: str,
        config: GraphAPIConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._verify_token = verify_token
        self.config = config or GraphAPIConfig()
        self._client = client
        self._page_token_resolver: PageTokenResolver | None = None
        self._message_handler: MessageHandler | None = None
        self._delivery_handler: DeliveryHandler | None = None

    # =========================================================================
    # Registration
    # =========================================================================

    def on_page_token(self, resolver: PageTokenResolver) -> PageTokenResolver:
        """Register the page token resolver."""
        self._page_token_resolver = resolver
        return resolver

    def on_message(self, handler: MessageHandler) -> MessageHandler:
        """Register the handler triggered when a text message is received."""
        self._message_handler = handler
        return handler

    def on_delivery(self, handler: DeliveryHandler) -> DeliveryHandler:
        """Register the handler triggered when a delivery receipt arrives."""
        self._delivery_handler = handler
        return handler

    # =========================================================================
    # Inbound
    # =========================================================================

    def verify_webhook(self, verify_token: str | None, challenge: str | None) -> str:
        """Answer the subscription handshake.

        Returns the challenge verbatim when ``verify_token`` matches,
        otherwise a fixed rejection message. Never raises.
        """
        if verify_token == self._verify_token:
            logfire.info("Webhook verified successfully")
            return challenge or ""

        logfire.warn("Webhook verification failed", verify_token=mask_pii(verify_token))
        return INCORRECT_VERIFY_TOKEN_MESSAGE

    async def handle_webhook(self, body: bytes | str) -> dict[str, str]:
        """Decode a webhook body, dispatch its events and build the acknowledgment."""
        try:
            payload = WebhookPayload.model_validate_json(body)
        except ValidationError as e:
            logfire.error(
                "Failed to decode webhook payload",
                error=str(e),
                error_count=e.error_count(),
            )
            return dict(ACK_NOT_OK)

        if payload.object != PAGE_OBJECT:
            logfire.warn(
                "Webhook object is not page, processing anyway",
                object=payload.object,
            )

        if not await self.dispatch(payload):
            return dict(ACK_NOT_OK)
        return dict(ACK_OK)

    async def dispatch(self, payload: WebhookPayload) -> bool:
        """Trigger the registered handlers for every event in ``payload``.

        Events are handled one at a time in payload order. The first page
        token failure stops the whole payload and returns False; handlers
        that already ran are not undone.
        """
        for entry in payload.entries:
            for event in entry.messaging_events:
                kind = classify_event(event)
                if kind is EventKind.UNKNOWN:
                    logfire.warn(
                        "Unknown messaging event, skipping",
                        page_id=entry.id,
                        sender_id=event.sender.id,
                        event=event.model_dump(exclude_none=True),
                    )
                    continue

                try:
                    page_token = await self._resolve_page_token(entry.id)
                except Exception as e:
                    logfire.error(
                        "Page token resolution failed, aborting webhook",
                        page_id=entry.id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    return False

                response = MessengerResponse(
                    recipient_id=event.sender.id,
                    token=page_token,
                    config=self.config,
                    client=self._client,
                )

                if kind is EventKind.TEXT:
                    if self._message_handler is not None:
                        message = Message.from_event(event, page_token)
                        await self._invoke(self._message_handler, kind, message, response)
                elif kind is EventKind.DELIVERY:
                    if self._delivery_handler is not None:
                        await self._invoke(
                            self._delivery_handler, kind, event.delivery, response
                        )

        return True

    async def _resolve_page_token(self, page_id: int) -> str:
        if self._page_token_resolver is None:
            raise PageTokenError("no page token resolver registered")
        return await self._page_token_resolver(page_id)

    async def _invoke(self, handler, kind: EventKind, event, response: MessengerResponse) -> None:
        # Handler failures belong to the handler; the acknowledgment is unaffected.
        try:
            await handler(self, event, response)
        except Exception as e:
            logfire.error(
                "Webhook handler raised",
                kind=kind.value,
                recipient_id=response.recipient_id,
                error=str(e),
                error_type=type(e).__name__,
            )

    # =========================================================================
    # Outbound
    # =========================================================================

    async def profile_by_id(self, page_token: str, user_id: int) -> MessengerProfile:
        """Retrieve the Messenger profile associated with ``user_id``."""
        return await get_user_profile(
            config=self.config,
            page_access_token=page_token,
            user_id=user_id,
            client=self._client,
        )

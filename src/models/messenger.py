"""Incoming/outgoing Facebook Messenger models.

The wire models mirror the webhook payload the Messenger Platform posts:

    {"object": "page",
     "entry": [{"id": 1, "time": 1000,
                "messaging": [{"sender": {"id": 7}, "recipient": {"id": 9},
                               "timestamp": 1000, "message": {"text": "hi"}}]}]}

Unknown keys are ignored so new platform fields never break decoding.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


# Last second representable by datetime (9999-12-31T23:59:59Z)
MAX_EPOCH_SECONDS = 253_402_300_799

EpochSeconds = Annotated[int, Field(ge=0, le=MAX_EPOCH_SECONDS)]


def unix_to_datetime(seconds: int) -> datetime:
    """Convert integer seconds since the epoch into an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class Party(BaseModel):
    """Sender or recipient of a messaging event."""

    id: int


class MessageContent(BaseModel):
    """The ``message`` case of a messaging event."""

    mid: str | None = None
    seq: int | None = None
    text: str = ""


class Delivery(BaseModel):
    """Delivery receipt: every message up to ``watermark`` has been delivered."""

    mids: list[str] = Field(default_factory=list)
    watermark: EpochSeconds
    seq: int | None = None

    @property
    def watermark_time(self) -> datetime:
        return unix_to_datetime(self.watermark)


class MessagingEvent(BaseModel):
    """One raw sub-event from an entry's ``messaging`` list.

    At most one of ``message`` or ``delivery`` is expected to be set.
    Use ``src.services.event_classifier.classify_event`` to decide which.
    """

    sender: Party
    recipient: Party
    timestamp: EpochSeconds = 0
    message: MessageContent | None = None
    delivery: Delivery | None = None


class Entry(BaseModel):
    """Facebook webhook entry, one per page."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    time: int | None = None
    messaging_events: list[MessagingEvent] = Field(
        default_factory=list, alias="messaging"
    )


class WebhookPayload(BaseModel):
    """Facebook webhook payload."""

    model_config = ConfigDict(populate_by_name=True)

    object: str
    entries: list[Entry] = Field(default_factory=list, alias="entry")


class EventKind(str, Enum):
    """Variant tag assigned to a messaging event."""

    TEXT = "text"
    DELIVERY = "delivery"
    UNKNOWN = "unknown"


class Message(BaseModel):
    """A received text message, materialized at dispatch time.

    ``page_token`` is the resolved credential of the page that received the
    message; it never appears on the wire.
    """

    mid: str | None = None
    seq: int | None = None
    text: str
    sender: Party
    recipient: Party
    time: datetime
    page_token: str

    @classmethod
    def from_event(cls, event: MessagingEvent, page_token: str) -> "Message":
        if event.message is None:
            raise ValueError("messaging event has no message")
        return cls(
            mid=event.message.mid,
            seq=event.message.seq,
            text=event.message.text,
            sender=event.sender,
            recipient=event.recipient,
            time=unix_to_datetime(event.timestamp),
            page_token=page_token,
        )


class MessengerProfile(BaseModel):
    """Public profile of a Messenger user."""

    first_name: str | None = None
    last_name: str | None = None
    profile_pic: str | None = None

"""Classification of raw webhook messaging events."""

from src.models.messenger import EventKind, MessagingEvent


def classify_event(event: MessagingEvent) -> EventKind:
    """Decide which variant a messaging event carries.

    Message takes precedence over delivery if a malformed event carries
    both. Events with neither are ``EventKind.UNKNOWN``.
    """
    if event.message is not None:
        return EventKind.TEXT
    if event.delivery is not None:
        return EventKind.DELIVERY
    return EventKind.UNKNOWN

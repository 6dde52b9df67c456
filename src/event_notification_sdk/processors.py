"""
Topic processors invoked for verified notifications.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

import structlog

from .constants import Topic

logger = structlog.get_logger(__name__)


def message_topic(message: Mapping[str, Any]) -> str | None:
    """Topic from the message metadata, or None when metadata is not a mapping."""
    metadata = message.get("metadata")
    if isinstance(metadata, Mapping):
        return metadata.get("topic")
    return None


def _notification(message: Mapping[str, Any]) -> Mapping[str, Any]:
    notification = message.get("notification")
    return notification if isinstance(notification, Mapping) else {}


class MessageProcessor(Protocol):
    """Anything with a ``process(message)`` method can handle a topic."""

    def process(self, message: Mapping[str, Any]) -> None: ...


class NoOpProcessor:
    """Processor for topics nobody registered."""

    def process(self, message: Mapping[str, Any]) -> None:
        logger.debug(
            "unhandled_topic",
            topic=message_topic(message),
        )


class AccountDeletionProcessor:
    """Logs marketplace account deletion requests."""

    def process(self, message: Mapping[str, Any]) -> None:
        notification = _notification(message)
        logger.info(
            "account_deletion_received",
            notification_id=notification.get("notificationId"),
            data=notification.get("data"),
        )


class PriorityListingRevisionProcessor:
    """Logs priority listing revisions."""

    def process(self, message: Mapping[str, Any]) -> None:
        notification = _notification(message)
        logger.info(
            "priority_listing_revision_received",
            notification_id=notification.get("notificationId"),
            data=notification.get("data"),
        )


class ProcessorRegistry:
    """
    Maps topic names to processors.

    Unknown topics resolve to a no-op processor, never to an error.

    Args:
        processors: Initial topic to processor mapping. Default: the
            built-in account deletion and priority listing processors

    Example:
        >>> registry = ProcessorRegistry()
        >>> registry.register("ITEM_SOLD", MyItemSoldProcessor())
        >>> registry.get("ITEM_SOLD").process(message)
    """

    def __init__(self, processors: Mapping[str, MessageProcessor] | None = None):
        if processors is None:
            processors = {
                Topic.MARKETPLACE_ACCOUNT_DELETION: AccountDeletionProcessor(),
                Topic.PRIORITY_LISTING_REVISION: PriorityListingRevisionProcessor(),
            }
        self._processors: dict[str, MessageProcessor] = dict(processors)
        self._fallback = NoOpProcessor()

    def register(self, topic: str, processor: MessageProcessor) -> None:
        self._processors[topic] = processor

    def get(self, topic: str | None) -> MessageProcessor:
        if topic is None:
            return self._fallback
        return self._processors.get(topic, self._fallback)

    def __contains__(self, topic: object) -> bool:
        return topic in self._processors

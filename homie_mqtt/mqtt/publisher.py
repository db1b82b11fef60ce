"""Hierarchical topic publishers for Homie entities."""

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol

from ..utils.logger import get_logger

logger = get_logger(__name__)


class Transport(Protocol):
    """Anything able to put a message on the wire."""

    def publish(self, topic: str, payload: str, retained: bool) -> bool:
        """Return True when the message was accepted for delivery."""


class HomiePublisher(ABC):
    """
    Publishes messages scoped under a topic path.

    Topic segments are only joined at publish time, so the path is always
    derived from the current parent chain.
    """

    @abstractmethod
    def topic(self) -> List[str]:
        """Ordered topic segments from the root to this entity."""

    @abstractmethod
    def publish(self, topic: str, payload: str, retained: bool) -> bool:
        """Hand a fully qualified message to the transport; False if it was dropped."""

    def publish_message(self, suffix: Optional[str] = None, payload: str = "", retained: bool = True) -> bool:
        """
        Publish at this entity's topic, or at a sub-topic when suffix is given.

        Example:
            publish_message("$name", "Lamp") -> "homie/dev/node/$name"
        """
        segments = self.topic()
        if suffix:
            segments = segments + [suffix]
        return self.publish("/".join(segments), payload, retained)

    def child(self, segment: str) -> 'HierarchicalHomiePublisher':
        """Derive a publisher one segment deeper."""
        return HierarchicalHomiePublisher(self, segment)


class RootPublisher(HomiePublisher):
    """
    Top of a publisher tree; holds the transport and optional base topic.

    The transport can be bound after the entity tree has been built; until
    then messages are dropped and publish() reports False.
    """

    def __init__(self, transport: Optional[Transport] = None, base_topic: Optional[str] = None) -> None:
        self.transport: Optional[Transport] = transport
        self.base_topic: Optional[str] = base_topic

    def bind(self, transport: Transport, base_topic: Optional[str] = None) -> None:
        self.transport = transport
        self.base_topic = base_topic
        logger.debug(f"Publisher bound to {type(transport).__name__} (base_topic={base_topic})")

    def topic(self) -> List[str]:
        return [self.base_topic] if self.base_topic else []

    def publish(self, topic: str, payload: str, retained: bool) -> bool:
        if self.transport is None:
            logger.debug(f"No transport bound, dropping message for {topic}")
            return False
        logger.debug(f"Publishing to {topic} (retained={retained}): {payload[:100]}")
        return bool(self.transport.publish(topic, payload, retained))


class HierarchicalHomiePublisher(HomiePublisher):
    """Publisher scoped one segment below its parent."""

    def __init__(self, parent: HomiePublisher, segment: str) -> None:
        self.parent: HomiePublisher = parent
        self.segment: str = segment

    def topic(self) -> List[str]:
        return self.parent.topic() + [self.segment]

    def publish(self, topic: str, payload: str, retained: bool) -> bool:
        return self.parent.publish(topic, payload, retained)

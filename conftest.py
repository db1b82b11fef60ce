"""Shared fixtures for the test modules."""

from typing import List, Tuple

import pytest

from homie_mqtt.mqtt.publisher import RootPublisher


class PublisherFake:
    """Records every (topic, payload, retained) triple handed to the transport."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str, bool]] = []
        self.publisher = RootPublisher(self)

    def publish(self, topic: str, payload: str, retained: bool) -> bool:
        self.messages.append((topic, payload, retained))
        return True

    def payloads(self, topic: str) -> List[str]:
        return [payload for t, payload, _ in self.messages if t == topic]

    def clear(self) -> None:
        self.messages.clear()


@pytest.fixture
def publisher_fake() -> PublisherFake:
    return PublisherFake()

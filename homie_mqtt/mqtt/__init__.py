"""Topic publishing and topic layout.

HomieMqttClient lives in homie_mqtt.mqtt.client; it depends on the device
model, which itself publishes through this package.
"""

from .publisher import HierarchicalHomiePublisher, HomiePublisher, RootPublisher, Transport
from .topics import HomieTopics

__all__ = ["HierarchicalHomiePublisher", "HomiePublisher", "HomieTopics", "RootPublisher", "Transport"]

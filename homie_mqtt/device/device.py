"""Homie device: root of the node/property tree."""

from enum import Enum
from typing import Any, Callable, Dict, Iterator, Optional

from ..mqtt.publisher import HierarchicalHomiePublisher, RootPublisher, Transport
from ..utils.errors import DuplicateIdError, UnknownTopicError
from ..utils.logger import get_logger
from .node import HomieNode
from .properties import BaseHomieProperty

logger = get_logger(__name__)

HOMIE_VERSION = "3.0.1"


class DeviceState(str, Enum):
    """Device lifecycle states published on $state."""
    INIT = "init"
    READY = "ready"
    DISCONNECTED = "disconnected"
    SLEEPING = "sleeping"
    LOST = "lost"
    ALERT = "alert"


class Device:
    """
    A Homie device.

    The device owns the root publisher of its tree. Nodes and properties can
    be built before a transport exists; bind() attaches one later.
    """

    def __init__(self, id: str, name: str) -> None:
        self.id: str = id
        self.name: str = name
        self.state: DeviceState = DeviceState.INIT
        self._root: RootPublisher = RootPublisher()
        self._publisher: HierarchicalHomiePublisher = HierarchicalHomiePublisher(self._root, id)
        self._nodes: Dict[str, HomieNode] = {}

    @property
    def nodes(self) -> Dict[str, HomieNode]:
        return dict(self._nodes)

    def __iter__(self) -> Iterator[HomieNode]:
        return iter(list(self._nodes.values()))

    def bind(self, transport: Transport, base_topic: Optional[str] = None) -> None:
        """Attach the transport every descendant publishes through."""
        self._root.bind(transport, base_topic)

    def add_node(self, node: HomieNode, init: Optional[Callable[[HomieNode], Any]] = None) -> HomieNode:
        if node.id in self._nodes:
            raise DuplicateIdError(f"Node {node.id} already exists in device {self.id}")

        if init is not None:
            init(node)
        self._nodes[node.id] = node
        logger.debug(f"Added node {node.id} to device {self.id}")
        return node

    def node(self,
             id: str,
             type: str,
             name: Optional[str] = None,
             init: Optional[Callable[[HomieNode], Any]] = None) -> HomieNode:
        """Build a node under this device; init receives it to add properties."""
        return self.add_node(HomieNode(id, type, self._publisher, name=name), init)

    def get_node(self, node_id: str) -> Optional[HomieNode]:
        return self._nodes.get(node_id)

    def find_property(self, node_id: str, property_id: str) -> Optional[BaseHomieProperty]:
        node = self._nodes.get(node_id)
        if node is None:
            return None
        return node.get_property(property_id)

    def mqtt_received(self, node_id: str, property_id: str, payload: str) -> None:
        """Route an inbound set payload to its property."""
        prop = self.find_property(node_id, property_id)
        if prop is None:
            raise UnknownTopicError(f"Device {self.id} has no property {node_id}/{property_id}")
        prop.mqtt_received(payload)

    def set_state(self, state: DeviceState) -> None:
        self.state = state
        self._publisher.publish_message("$state", payload=state.value)
        logger.info(f"Device {self.id} state: {state.value}")

    def publish_config(self) -> None:
        """Announce the whole tree, bracketed by $state init and ready."""
        self.set_state(DeviceState.INIT)
        self._publisher.publish_message("$homie", payload=HOMIE_VERSION)
        self._publisher.publish_message("$name", payload=self.name)
        self._publisher.publish_message("$nodes", payload=",".join(self._nodes))
        for node in self:
            node.publish_config()
        self.set_state(DeviceState.READY)

    def disconnect(self) -> None:
        self.set_state(DeviceState.DISCONNECTED)


def device(id: str, name: str, init: Optional[Callable[[Device], Any]] = None) -> Device:
    """
    Build a device tree.

    Example:
        device("lamp", "Desk lamp", lambda d: d.node("light", "switch").boolean("power"))
    """
    dev = Device(id, name)
    if init is not None:
        init(dev)
    return dev

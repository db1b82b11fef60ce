"""MQTT client binding a Homie device to a paho-mqtt session."""

import asyncio
from dataclasses import asdict
from typing import Any, Optional

import paho.mqtt.client as mqtt

from ..config.settings import MQTTConfig
from ..device.device import Device, DeviceState
from ..utils.errors import ClientStateError, MQTTConnectionError
from ..utils.logger import get_logger, redact_sensitive
from .topics import HomieTopics

logger = get_logger(__name__)


class HomieMqttClient:
    """
    Wrapper for paho.mqtt.client acting as the device's transport.

    Publishes the device tree on connect, routes inbound set messages to
    properties and announces $state=disconnected before tearing down.
    """

    def __init__(self, config: MQTTConfig, device: Device) -> None:
        self.config: MQTTConfig = config
        self.device: Device = device
        self.topics: HomieTopics = HomieTopics(config.base_topic)
        self.client: mqtt.Client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2, client_id=config.client_id
        )
        self.connected: bool = False
        self._connect_called: bool = False
        self._announced: bool = False
        self._last_publish: Optional[mqtt.MQTTMessageInfo] = None
        self._setup_callbacks()
        self._setup_authentication()
        if config.use_tls:
            self._setup_tls()

    @classmethod
    def from_env(cls, device: Device) -> 'HomieMqttClient':
        """Create a client for device using MQTT_* environment variables."""
        return cls(MQTTConfig.from_env(), device)

    def _setup_callbacks(self) -> None:
        """Configure MQTT callbacks for connection events."""
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message

    def _setup_authentication(self) -> None:
        """Configure MQTT authentication if credentials provided."""
        if self.config.username and self.config.password:
            self.client.username_pw_set(
                self.config.username,
                self.config.password
            )

    def _setup_tls(self) -> None:
        """Configure TLS/SSL for secure connection."""
        self.client.tls_set()

    def _setup_will(self) -> None:
        """The broker announces $state=lost if the session dies uncleanly."""
        self.client.will_set(
            self.topics.state_topic(self.device.id),
            DeviceState.LOST.value,
            qos=self.config.qos_level,
            retain=True,
        )

    def _on_connect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any = None) -> None:
        """Handle successful connection - subscribe to the device's set topics."""
        if reason_code == 0:
            logger.info("Connected to MQTT broker")
            self.connected = True

            set_topic = self.topics.set_subscription_topic(self.device.id)
            client.subscribe(set_topic, qos=self.config.qos_level)
            logger.info(f"Subscribed to set topics: {set_topic}")

            if self._announced:
                # The broker may have published the $state=lost will meanwhile
                logger.info("Reconnected, announcing device again")
                self.device.publish_config()
        else:
            logger.error(f"Failed to connect to MQTT broker: {reason_code}")
            self.connected = False

    def _on_disconnect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any = None) -> None:
        """Handle disconnection."""
        logger.warning(f"Disconnected from MQTT broker (rc={reason_code})")
        self.connected = False

        if reason_code != 0:
            # Unexpected disconnection - paho will auto-reconnect
            logger.info("Attempting automatic reconnection...")

    def _on_message(self, client: Any, userdata: Any, msg: Any) -> None:
        """Route incoming set messages to the addressed property."""
        try:
            topic = msg.topic
            payload = msg.payload.decode('utf-8')
            logger.info(f"Received message on topic {topic}: {payload}")

            ids = self.topics.parse_set_topic(topic)
            if ids is None:
                logger.warning(f"Ignoring message on non-set topic: {topic}")
                return

            device_id, node_id, property_id = ids
            if device_id != self.device.id:
                logger.warning(f"Ignoring set for unknown device {device_id}")
                return

            self.device.mqtt_received(node_id, property_id, payload)
        except Exception as e:
            # We're in paho-mqtt's network thread; keep it alive
            logger.error(f"Error processing MQTT message: {e}", exc_info=True)

    def publish(self, topic: str, payload: str, retained: bool) -> bool:
        """Transport entry point used by the device's publishers."""
        if not self.connected:
            logger.warning(f"Not connected to MQTT broker, skipping publish to {topic}")
            return False

        result = self.client.publish(topic, payload, qos=self.config.qos_level, retain=retained)
        self._last_publish = result

        if result.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.warning(f"Failed to publish to {topic}: {result.rc}")
            return False
        return True

    async def connect(self) -> None:
        """Connect, wait for the broker and announce the device."""
        if self._connect_called:
            raise ClientStateError("connect() may only be called once")
        self._connect_called = True

        logger.debug(f"MQTT settings: {redact_sensitive(asdict(self.config))}")
        self.device.bind(self, self.config.base_topic)
        self._setup_will()

        try:
            logger.info(
                f"Connecting to MQTT broker {self.config.broker_host}:{self.config.broker_port}"
            )

            self.client.connect(
                self.config.broker_host,
                self.config.broker_port,
                keepalive=60
            )

            # Start the MQTT client loop in a separate thread
            self.client.loop_start()

            waited = 0.0
            while not self.connected and waited < self.config.connect_timeout:
                await asyncio.sleep(0.1)
                waited += 0.1

            if not self.connected:
                raise MQTTConnectionError("Failed to connect to MQTT broker within timeout")

        except MQTTConnectionError:
            self.client.loop_stop()
            raise
        except Exception as e:
            logger.error(f"Failed to connect to MQTT broker: {e}")
            raise MQTTConnectionError(f"Connection failed: {e}") from e

        self.device.publish_config()
        self._announced = True
        logger.info(f"Device {self.device.id} announced under {self.topics.device_topic(self.device.id)}")

    def disconnect(self) -> None:
        """Announce $state=disconnected, then close the session."""
        logger.info("Disconnecting from MQTT broker")
        if self.connected:
            self.device.disconnect()
            if self._last_publish is not None:
                try:
                    self._last_publish.wait_for_publish(timeout=5)
                except (RuntimeError, ValueError) as e:
                    logger.warning(f"Disconnected state may not have been delivered: {e}")
        self.client.disconnect()
        self.client.loop_stop()
        self.connected = False
        logger.info("Disconnected from MQTT broker")

"""Main application entry point for the demo Homie device service."""

import asyncio
import signal
from enum import Enum
from typing import Any, Optional

from .config import AppConfig, load_config
from .device import Device, HomieNode, PropertyUpdate, device
from .mqtt.client import HomieMqttClient
from .utils import get_logger, set_log_level

logger = get_logger(__name__)


class Mode(Enum):
    """Operating modes exposed by the demo controller."""
    OFF = "off"
    AUTO = "auto"
    MANUAL = "manual"


def echo_update(update: PropertyUpdate[Any]) -> None:
    """Accept every set command by publishing it back as the current value."""
    logger.info(f"Set {'/'.join(update.property.topic_segments)} -> {update.update!r}")
    update.property.update(update.update)


def build_controller(node: HomieNode) -> None:
    node.string("label", name="Label", init=lambda p: p.subscribe(echo_update))
    node.number("level", name="Level", unit="%", range=(0, 100), init=lambda p: p.subscribe(echo_update))
    node.floating("setpoint", name="Setpoint", unit="°C", range=(5.0, 30.0),
                  init=lambda p: p.subscribe(echo_update))
    node.boolean("power", name="Power", init=lambda p: p.subscribe(echo_update))
    node.enum("mode", Mode, name="Mode", init=lambda p: p.subscribe(echo_update))
    node.rgb_color("color", name="Color", init=lambda p: p.subscribe(echo_update))


def build_device(config: AppConfig) -> Device:
    return device(
        config.device_id,
        config.device_name,
        lambda d: d.node("controller", "demo", name="Controller", init=build_controller),
    )


class HomieDeviceService:
    """
    Runs one Homie device until SIGINT/SIGTERM.
    """

    def __init__(self) -> None:
        self.config: Optional[AppConfig] = None
        self.device: Optional[Device] = None
        self.mqtt_client: Optional[HomieMqttClient] = None
        self._shutdown_event: asyncio.Event = asyncio.Event()

    async def initialize(self) -> None:
        """Load configuration, build the device and connect it."""
        try:
            self.config = load_config()
            set_log_level(self.config.log_level)
            logger.info(f"Configuration loaded (device={self.config.device_id})")

            self.device = build_device(self.config)
            self.mqtt_client = HomieMqttClient(self.config.mqtt, self.device)
            await self.mqtt_client.connect()

            logger.info("Service initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize service: {e}", exc_info=True)
            raise

    async def run(self) -> None:
        """Main service loop."""
        try:
            await self.initialize()
            logger.info("Service is running. Waiting for set commands...")
            await self._shutdown_event.wait()
            logger.info("Shutdown signal received")
        except Exception as e:
            logger.critical(f"Service failed: {e}", exc_info=True)
            raise
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Graceful shutdown of all components."""
        logger.info("Shutting down service")
        if self.mqtt_client:
            self.mqtt_client.disconnect()
        logger.info("Service shutdown complete")

    def signal_handler(self, sig: int, frame: Any) -> None:
        """Handle shutdown signals (SIGINT, SIGTERM)."""
        logger.info(f"Received signal {sig}, initiating shutdown")
        try:
            loop = asyncio.get_running_loop()
            loop.call_soon_threadsafe(self._shutdown_event.set)
        except RuntimeError:
            self._shutdown_event.set()


async def main() -> None:
    """Application entry point."""
    service = HomieDeviceService()

    signal.signal(signal.SIGINT, service.signal_handler)
    signal.signal(signal.SIGTERM, service.signal_handler)

    await service.run()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

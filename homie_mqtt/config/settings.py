"""Configuration settings loaded from environment variables."""

import os
import uuid
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit

from dotenv import load_dotenv

from ..utils.errors import ConfigurationError


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


_PLAIN_SCHEMES = {"tcp": 1883, "mqtt": 1883}
_TLS_SCHEMES = {"ssl": 8883, "mqtts": 8883}


def parse_server_uri(uri: str) -> Tuple[str, int, bool]:
    """Split a broker URI such as tcp://host:1883 into (host, port, use_tls)."""
    parts = urlsplit(uri)
    scheme = parts.scheme.lower()
    if scheme in _TLS_SCHEMES:
        default_port, use_tls = _TLS_SCHEMES[scheme], True
    elif scheme in _PLAIN_SCHEMES:
        default_port, use_tls = _PLAIN_SCHEMES[scheme], False
    else:
        raise ConfigurationError(f"Invalid MQTT_SERVER {uri!r}: scheme must be tcp, mqtt, ssl or mqtts")

    try:
        port = parts.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid MQTT_SERVER {uri!r}: {e}")
    if not parts.hostname:
        raise ConfigurationError(f"Invalid MQTT_SERVER {uri!r}: missing host")
    return parts.hostname, port if port is not None else default_port, use_tls


@dataclass
class MQTTConfig:
    """MQTT broker configuration."""
    broker_host: str = "localhost"
    broker_port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = False
    client_id: str = "homie_mqtt"
    qos_level: int = 1
    base_topic: str = "homie"
    connect_timeout: float = 10.0

    @staticmethod
    def from_env() -> 'MQTTConfig':
        """Load from environment variables with validation."""
        use_tls = _env_flag("MQTT_USE_TLS", "false")

        try:
            server = os.getenv("MQTT_SERVER")
            if server:
                broker_host, broker_port, server_tls = parse_server_uri(server)
                use_tls = use_tls or server_tls
            else:
                broker_host = os.getenv("MQTT_BROKER_HOST", "localhost")
                broker_port = int(os.getenv("MQTT_BROKER_PORT", "1883"))
            qos_level = int(os.getenv("MQTT_QOS", "1"))
            connect_timeout = float(os.getenv("MQTT_CONNECT_TIMEOUT", "10"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid MQTT port, QoS or timeout configuration: {e}")

        if qos_level not in (0, 1, 2):
            raise ConfigurationError(f"Invalid MQTT QoS level: {qos_level}. Must be 0, 1 or 2")

        return MQTTConfig(
            broker_host=broker_host,
            broker_port=broker_port,
            username=os.getenv("MQTT_USERNAME"),
            password=os.getenv("MQTT_PASSWORD"),
            use_tls=use_tls,
            client_id=os.getenv("MQTT_CLIENT_ID") or f"homie-{uuid.uuid4()}",
            qos_level=qos_level,
            base_topic=os.getenv("HOMIE_BASE_TOPIC", "homie"),
            connect_timeout=connect_timeout,
        )


@dataclass
class AppConfig:
    """Complete application configuration."""
    mqtt: MQTTConfig
    log_level: str
    device_id: str
    device_name: str

    @staticmethod
    def from_env() -> 'AppConfig':
        """Load complete configuration from environment."""
        device_id = os.getenv("HOMIE_DEVICE_ID")
        if not device_id:
            raise ConfigurationError("Missing required device id (HOMIE_DEVICE_ID)")

        if "/" in device_id:
            raise ConfigurationError(f"Invalid device id: {device_id}. Must not contain '/'")

        return AppConfig(
            mqtt=MQTTConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            device_id=device_id,
            device_name=os.getenv("HOMIE_DEVICE_NAME", device_id),
        )


def load_config() -> AppConfig:
    """Load configuration from .env file and environment variables."""
    load_dotenv()
    return AppConfig.from_env()

"""Configuration management for the Homie MQTT device."""

from .settings import AppConfig, MQTTConfig, load_config

__all__ = ["AppConfig", "MQTTConfig", "load_config"]

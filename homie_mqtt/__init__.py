"""Homie convention devices published over MQTT."""

from .device import HSV, RGB, Device, DeviceState, HomieNode, PropertyUpdate, device
from .mqtt.client import HomieMqttClient

__all__ = ["HSV", "RGB", "Device", "DeviceState", "HomieMqttClient", "HomieNode", "PropertyUpdate", "device"]

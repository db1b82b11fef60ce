"""Homie device model: devices, nodes, properties and color values."""

from .colors import HSV, RGB
from .device import Device, DeviceState, device
from .node import HomieNode
from .properties import (
    BaseHomieProperty,
    BoolProperty,
    EnumProperty,
    FloatProperty,
    HSVColorProperty,
    NumberProperty,
    PropertyUpdate,
    RGBColorProperty,
    StringProperty,
)

__all__ = [
    "BaseHomieProperty",
    "BoolProperty",
    "Device",
    "DeviceState",
    "EnumProperty",
    "FloatProperty",
    "HSV",
    "HSVColorProperty",
    "HomieNode",
    "NumberProperty",
    "PropertyUpdate",
    "RGB",
    "RGBColorProperty",
    "StringProperty",
    "device",
]

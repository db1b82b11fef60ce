"""Color value types carried by color properties."""

from dataclasses import dataclass
from typing import Tuple

from ..utils.errors import InvalidValueError, ValueOutOfRangeError


def _check_component(name: str, value: int, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValueError(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= upper:
        raise ValueOutOfRangeError(f"{name} must be between 0 and {upper}, got {value}")


@dataclass(frozen=True)
class RGB:
    """Red, green and blue components (0-255)."""
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        _check_component("red", self.red, 255)
        _check_component("green", self.green, 255)
        _check_component("blue", self.blue, 255)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)


@dataclass(frozen=True)
class HSV:
    """Hue (0-360), saturation and value (0-100)."""
    hue: int
    saturation: int
    value: int

    def __post_init__(self) -> None:
        _check_component("hue", self.hue, 360)
        _check_component("saturation", self.saturation, 100)
        _check_component("value", self.value, 100)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.hue, self.saturation, self.value)

"""Typed Homie properties and their wire conversions."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from ..mqtt.publisher import HomiePublisher
from ..utils.errors import InvalidValueError, UnknownEnumValueError, ValueOutOfRangeError
from ..utils.logger import get_logger
from .colors import HSV, RGB

logger = get_logger(__name__)

T = TypeVar("T")
N = TypeVar("N", int, float)
E = TypeVar("E", bound=Enum)

_UNSET = object()


@dataclass(frozen=True)
class PropertyUpdate(Generic[T]):
    """Inbound set command, parsed into the property's value type."""
    property: 'BaseHomieProperty[T]'
    update: T


Subscriber = Callable[[PropertyUpdate[Any]], None]


class BaseHomieProperty(ABC, Generic[T]):
    """
    Common behaviour of every Homie property.

    Subclasses fix the datatype and supply the conversion between values
    and wire payloads. last_value and the subscriber are guarded by a lock
    since inbound delivery runs on the MQTT network thread.
    """

    datatype: str = ""

    def __init__(self,
                 id: str,
                 parent_publisher: HomiePublisher,
                 name: Optional[str] = None,
                 retained: bool = True,
                 unit: Optional[str] = None,
                 value_format: Optional[str] = None) -> None:
        self._id: str = id
        self.name: Optional[str] = name
        self.retained: bool = retained
        self.unit: Optional[str] = unit
        self._format: Optional[str] = value_format
        self._publisher: HomiePublisher = parent_publisher.child(id)
        self._subscriber: Optional[Subscriber] = None
        self._last_value: Any = _UNSET
        self._lock = threading.Lock()

    @property
    def id(self) -> str:
        return self._id

    @property
    def format(self) -> Optional[str]:
        return self._format

    @property
    def settable(self) -> bool:
        return self._subscriber is not None

    @property
    def last_value(self) -> Optional[T]:
        return None if self._last_value is _UNSET else self._last_value

    @property
    def topic_segments(self) -> List[str]:
        return self._publisher.topic()

    def update(self, value: T) -> None:
        """Publish value unless it equals the last published one.

        last_value only changes when the transport accepted the message, so a
        value set before the device is connected is published on the next
        update.
        """
        self.validate(value)
        with self._lock:
            if self._last_value is not _UNSET and value == self._last_value:
                return
            if self._publisher.publish_message(payload=self.value_to_string(value), retained=self.retained):
                self._last_value = value

    def validate(self, value: T) -> None:
        """Hook for variants with value constraints."""

    def value_to_string(self, value: T) -> str:
        return str(value)

    @abstractmethod
    def value_from_string(self, payload: str) -> T:
        """Parse an inbound wire payload."""

    def property_update_from_string(self, payload: str) -> PropertyUpdate[T]:
        return PropertyUpdate(self, self.value_from_string(payload))

    def mqtt_received(self, payload: str) -> None:
        """Entry point for inbound set messages."""
        with self._lock:
            subscriber = self._subscriber
        if subscriber is None:
            logger.debug(f"Ignoring set for {'/'.join(self.topic_segments)}: no subscriber")
            return
        subscriber(self.property_update_from_string(payload))

    def subscribe(self, callback: Subscriber) -> 'BaseHomieProperty[T]':
        """Register the single update callback, replacing any previous one."""
        with self._lock:
            self._subscriber = callback
        self._publish_settable()
        return self

    def publish_config(self) -> None:
        if self.name is not None:
            self._publisher.publish_message("$name", payload=self.name)
        self._publish_settable()
        self._publisher.publish_message("$retained", payload=_bool_to_string(self.retained))
        if self.unit is not None:
            self._publisher.publish_message("$unit", payload=self.unit)
        self._publisher.publish_message("$datatype", payload=self.datatype)
        if self._format is not None:
            self._publisher.publish_message("$format", payload=self._format)

    def _publish_settable(self) -> None:
        self._publisher.publish_message("$settable", payload=_bool_to_string(self.settable))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, datatype={self.datatype!r})"


def _bool_to_string(value: bool) -> str:
    return "true" if value else "false"


class StringProperty(BaseHomieProperty[str]):
    datatype = "string"

    def value_from_string(self, payload: str) -> str:
        return payload


class AbstractNumberProperty(BaseHomieProperty[N]):
    """Numeric property with an optional closed range, published as $format "min:max"."""

    def __init__(self,
                 id: str,
                 parent_publisher: HomiePublisher,
                 name: Optional[str] = None,
                 retained: bool = True,
                 unit: Optional[str] = None,
                 range: Optional[Tuple[N, N]] = None) -> None:
        if range is not None and range[0] > range[1]:
            raise ValueError(f"Invalid range for property {id}: {range[0]} > {range[1]}")
        super().__init__(
            id=id,
            parent_publisher=parent_publisher,
            name=name,
            retained=retained,
            unit=unit,
            value_format=f"{range[0]}:{range[1]}" if range is not None else None,
        )
        self.range: Optional[Tuple[N, N]] = range

    def validate(self, value: N) -> None:
        if self.range is None:
            return
        low, high = self.range
        if not low <= value <= high:
            raise ValueOutOfRangeError(
                f"Value {value} for property {self.id} outside range {low}:{high}"
            )


class NumberProperty(AbstractNumberProperty[int]):
    datatype = "integer"

    def validate(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidValueError(f"Property {self.id} expects an integer, got {value!r}")
        super().validate(value)

    def value_from_string(self, payload: str) -> int:
        return int(payload)


class FloatProperty(AbstractNumberProperty[float]):
    datatype = "float"

    def validate(self, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidValueError(f"Property {self.id} expects a number, got {value!r}")
        super().validate(value)

    def value_from_string(self, payload: str) -> float:
        return float(payload)


class BoolProperty(BaseHomieProperty[bool]):
    datatype = "boolean"

    def value_to_string(self, value: bool) -> str:
        return _bool_to_string(value)

    def value_from_string(self, payload: str) -> bool:
        return payload.strip().lower() == "true"


def enum_map_from(enum_type: Type[E]) -> Dict[str, E]:
    """Wire names for an Enum: string values as-is, otherwise lowercased member names."""
    return {
        member.value if isinstance(member.value, str) else member.name.lower(): member
        for member in enum_type
    }


class EnumProperty(BaseHomieProperty[E]):
    datatype = "enum"

    def __init__(self,
                 id: str,
                 parent_publisher: HomiePublisher,
                 enum_map: Mapping[str, E],
                 name: Optional[str] = None,
                 retained: bool = True,
                 unit: Optional[str] = None) -> None:
        super().__init__(
            id=id,
            parent_publisher=parent_publisher,
            name=name,
            retained=retained,
            unit=unit,
            value_format=",".join(enum_map),
        )
        self.enum_map: Dict[str, E] = dict(enum_map)
        self._names: Dict[E, str] = {value: key for key, value in self.enum_map.items()}

    def validate(self, value: E) -> None:
        if value not in self._names:
            raise UnknownEnumValueError(f"{value!r} is not a value of property {self.id}")

    def value_to_string(self, value: E) -> str:
        return self._names[value]

    def value_from_string(self, payload: str) -> E:
        try:
            return self.enum_map[payload]
        except KeyError:
            raise UnknownEnumValueError(f"No enum value {payload!r} for property {self.id}") from None


class AbstractColorProperty(BaseHomieProperty[T]):
    datatype = "color"

    def __init__(self,
                 id: str,
                 parent_publisher: HomiePublisher,
                 color_type: str,
                 name: Optional[str] = None,
                 retained: bool = True,
                 unit: Optional[str] = None) -> None:
        super().__init__(
            id=id,
            parent_publisher=parent_publisher,
            name=name,
            retained=retained,
            unit=unit,
            value_format=color_type,
        )

    @staticmethod
    def parse_color_string(payload: str) -> Tuple[int, int, int]:
        parts = payload.split(",")
        if len(parts) != 3:
            raise ValueError(f"Expected three comma separated components, got {payload!r}")
        first, second, third = (int(part) for part in parts)
        return (first, second, third)


class HSVColorProperty(AbstractColorProperty[HSV]):

    def __init__(self,
                 id: str,
                 parent_publisher: HomiePublisher,
                 name: Optional[str] = None,
                 retained: bool = True,
                 unit: Optional[str] = None) -> None:
        super().__init__(id, parent_publisher, "hsv", name=name, retained=retained, unit=unit)

    def value_to_string(self, value: HSV) -> str:
        return f"{value.hue},{value.saturation},{value.value}"

    def value_from_string(self, payload: str) -> HSV:
        return HSV(*self.parse_color_string(payload))


class RGBColorProperty(AbstractColorProperty[RGB]):

    def __init__(self,
                 id: str,
                 parent_publisher: HomiePublisher,
                 name: Optional[str] = None,
                 retained: bool = True,
                 unit: Optional[str] = None) -> None:
        super().__init__(id, parent_publisher, "rgb", name=name, retained=retained, unit=unit)

    def value_to_string(self, value: RGB) -> str:
        return f"{value.red},{value.green},{value.blue}"

    def value_from_string(self, payload: str) -> RGB:
        return RGB(*self.parse_color_string(payload))

"""Homie nodes: named groups of properties."""

from enum import Enum
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar, Union

from ..mqtt.publisher import HomiePublisher
from ..utils.errors import DuplicateIdError
from ..utils.logger import get_logger
from .properties import (
    BaseHomieProperty,
    BoolProperty,
    EnumProperty,
    FloatProperty,
    HSVColorProperty,
    NumberProperty,
    RGBColorProperty,
    StringProperty,
    enum_map_from,
)

logger = get_logger(__name__)

P = TypeVar("P", bound=BaseHomieProperty)
E = TypeVar("E", bound=Enum)

PropertyInit = Optional[Callable[[Any], None]]


class HomieNode:
    """
    Container of properties published under <device>/<node id>.

    Property ids are unique within the node. The $properties attribute is
    re-published on every successful add so it always lists every property
    in insertion order.
    """

    def __init__(self, id: str, type: str, parent_publisher: HomiePublisher, name: Optional[str] = None) -> None:
        self.id: str = id
        self.name: Optional[str] = name
        self.type: str = type
        self._publisher: HomiePublisher = parent_publisher.child(id)
        self._properties: Dict[str, BaseHomieProperty] = {}

    @property
    def publisher(self) -> HomiePublisher:
        return self._publisher

    @property
    def properties(self) -> Dict[str, BaseHomieProperty]:
        return dict(self._properties)

    def __iter__(self) -> Iterator[BaseHomieProperty]:
        return iter(list(self._properties.values()))

    def __len__(self) -> int:
        return len(self._properties)

    def get_property(self, property_id: str) -> Optional[BaseHomieProperty]:
        return self._properties.get(property_id)

    def add_property(self, prop: P, init: PropertyInit = None) -> P:
        """Register a property, run init against it and republish $properties."""
        if prop.id in self._properties:
            raise DuplicateIdError(f"Property {prop.id} already exists in node {self.id}")

        if init is not None:
            init(prop)
        self._properties[prop.id] = prop
        logger.debug(f"Added property {prop.id} to node {self.id}")
        self._publish_properties()
        return prop

    def publish_config(self) -> None:
        if self.name is not None:
            self._publisher.publish_message("$name", payload=self.name)
        self._publisher.publish_message("$type", payload=self.type)
        self._publish_properties()
        for prop in self:
            prop.publish_config()

    def _publish_properties(self) -> None:
        self._publisher.publish_message("$properties", payload=",".join(self._properties))

    # ===== Typed property builders =====

    def string(self, id: str, name: Optional[str] = None, retained: bool = True,
               unit: Optional[str] = None, init: PropertyInit = None) -> StringProperty:
        return self.add_property(
            StringProperty(id, self._publisher, name=name, retained=retained, unit=unit), init
        )

    def number(self, id: str, name: Optional[str] = None, retained: bool = True, unit: Optional[str] = None,
               range: Optional[Tuple[int, int]] = None, init: PropertyInit = None) -> NumberProperty:
        return self.add_property(
            NumberProperty(id, self._publisher, name=name, retained=retained, unit=unit, range=range), init
        )

    def floating(self, id: str, name: Optional[str] = None, retained: bool = True, unit: Optional[str] = None,
                 range: Optional[Tuple[float, float]] = None, init: PropertyInit = None) -> FloatProperty:
        return self.add_property(
            FloatProperty(id, self._publisher, name=name, retained=retained, unit=unit, range=range), init
        )

    def boolean(self, id: str, name: Optional[str] = None, retained: bool = True,
                unit: Optional[str] = None, init: PropertyInit = None) -> BoolProperty:
        return self.add_property(
            BoolProperty(id, self._publisher, name=name, retained=retained, unit=unit), init
        )

    def enum(self, id: str, values: Union[Type[E], Mapping[str, E]], name: Optional[str] = None,
             retained: bool = True, unit: Optional[str] = None, init: PropertyInit = None) -> EnumProperty[E]:
        """values is either an Enum class or an explicit wire name -> member mapping."""
        enum_map = enum_map_from(values) if isinstance(values, type) else values
        return self.add_property(
            EnumProperty(id, self._publisher, enum_map, name=name, retained=retained, unit=unit), init
        )

    def hsv_color(self, id: str, name: Optional[str] = None, retained: bool = True,
                  unit: Optional[str] = None, init: PropertyInit = None) -> HSVColorProperty:
        return self.add_property(
            HSVColorProperty(id, self._publisher, name=name, retained=retained, unit=unit), init
        )

    def rgb_color(self, id: str, name: Optional[str] = None, retained: bool = True,
                  unit: Optional[str] = None, init: PropertyInit = None) -> RGBColorProperty:
        return self.add_property(
            RGBColorProperty(id, self._publisher, name=name, retained=retained, unit=unit), init
        )

"""Tests for typed Homie properties."""

import threading
from enum import Enum
from unittest.mock import Mock

import pytest

from homie_mqtt.device import (
    HSV,
    RGB,
    BoolProperty,
    EnumProperty,
    FloatProperty,
    HSVColorProperty,
    NumberProperty,
    PropertyUpdate,
    RGBColorProperty,
    StringProperty,
)
from homie_mqtt.mqtt import RootPublisher
from homie_mqtt.utils.errors import InvalidValueError, UnknownEnumValueError, ValueOutOfRangeError


class Mode(Enum):
    ON = "on"
    OFF = "off"


@pytest.fixture
def node_publisher(publisher_fake):
    return publisher_fake.publisher.child("node")


def value_messages(publisher_fake, topic="node/prop"):
    return [(payload, retained) for t, payload, retained in publisher_fake.messages if t == topic]


def test_update_same_value_publishes_once(publisher_fake, node_publisher):
    prop = StringProperty("prop", node_publisher)

    prop.update("foo")
    prop.update("foo")

    assert value_messages(publisher_fake) == [("foo", True)]
    assert prop.last_value == "foo"


def test_update_distinct_values_publish_in_order(publisher_fake, node_publisher):
    prop = NumberProperty("prop", node_publisher)

    for value in (1, 2, 2, 3, 1):
        prop.update(value)

    assert [payload for payload, _ in value_messages(publisher_fake)] == ["1", "2", "3", "1"]


def test_update_uses_retained_flag(publisher_fake, node_publisher):
    prop = StringProperty("prop", node_publisher, retained=False)

    prop.update("foo")

    assert value_messages(publisher_fake) == [("foo", False)]


def test_publish_config_full(publisher_fake, node_publisher):
    prop = NumberProperty("prop", node_publisher, name="Level", unit="%", range=(0, 10))

    prop.publish_config()

    assert publisher_fake.messages == [
        ("node/prop/$name", "Level", True),
        ("node/prop/$settable", "false", True),
        ("node/prop/$retained", "true", True),
        ("node/prop/$unit", "%", True),
        ("node/prop/$datatype", "integer", True),
        ("node/prop/$format", "0:10", True),
    ]


def test_publish_config_skips_missing_optionals(publisher_fake, node_publisher):
    prop = StringProperty("prop", node_publisher, retained=False)

    prop.publish_config()

    assert publisher_fake.messages == [
        ("node/prop/$settable", "false", True),
        ("node/prop/$retained", "false", True),
        ("node/prop/$datatype", "string", True),
    ]


def test_subscribe_republishes_settable(publisher_fake, node_publisher):
    prop = StringProperty("prop", node_publisher)
    assert not prop.settable

    returned = prop.subscribe(lambda update: None)

    assert returned is prop
    assert prop.settable
    assert publisher_fake.messages == [("node/prop/$settable", "true", True)]


def test_subscribe_replaces_previous_callback(node_publisher):
    prop = StringProperty("prop", node_publisher)
    first, second = Mock(), Mock()

    prop.subscribe(first)
    prop.subscribe(second)
    prop.mqtt_received("hello")

    first.assert_not_called()
    second.assert_called_once_with(PropertyUpdate(prop, "hello"))


def test_mqtt_received_without_subscriber_is_noop(publisher_fake, node_publisher):
    prop = EnumProperty("prop", node_publisher, {"on": Mode.ON})

    prop.mqtt_received("unknown")

    assert publisher_fake.messages == []


def test_range_violation_does_not_publish(publisher_fake, node_publisher):
    prop = NumberProperty("prop", node_publisher, range=(0, 10))

    with pytest.raises(ValueOutOfRangeError):
        prop.update(11)
    assert value_messages(publisher_fake) == []
    assert prop.last_value is None

    prop.update(5)
    assert value_messages(publisher_fake) == [("5", True)]


def test_range_violation_keeps_last_value(publisher_fake, node_publisher):
    prop = FloatProperty("prop", node_publisher, range=(0.0, 1.0))
    prop.update(0.5)

    with pytest.raises(ValueError):
        prop.update(-0.1)

    assert prop.last_value == 0.5
    assert value_messages(publisher_fake) == [("0.5", True)]


def test_range_bounds_are_inclusive(publisher_fake, node_publisher):
    prop = NumberProperty("prop", node_publisher, range=(0, 10))

    prop.update(0)
    prop.update(10)

    assert [payload for payload, _ in value_messages(publisher_fake)] == ["0", "10"]


def test_inverted_range_is_rejected(node_publisher):
    with pytest.raises(ValueError):
        NumberProperty("prop", node_publisher, range=(10, 0))


def test_number_parsing(node_publisher):
    integer = NumberProperty("int", node_publisher)
    floating = FloatProperty("float", node_publisher)

    assert integer.property_update_from_string("42").update == 42
    assert floating.property_update_from_string("2.5").update == 2.5
    with pytest.raises(ValueError):
        integer.property_update_from_string("4.2")


def test_bool_wire_format(publisher_fake, node_publisher):
    prop = BoolProperty("prop", node_publisher)

    prop.update(True)
    prop.update(False)

    assert [payload for payload, _ in value_messages(publisher_fake)] == ["true", "false"]
    assert prop.value_from_string("TRUE") is True
    assert prop.value_from_string("false") is False
    assert prop.value_from_string("yes") is False


def test_enum_format_and_round_trip(publisher_fake, node_publisher):
    prop = EnumProperty("prop", node_publisher, {"on": Mode.ON, "off": Mode.OFF})
    received = []
    prop.subscribe(received.append)

    prop.mqtt_received("off")
    prop.update(Mode.ON)

    assert prop.format == "on,off"
    assert received[0].update is Mode.OFF
    assert value_messages(publisher_fake) == [("on", True)]


def test_enum_unknown_wire_value_fails(node_publisher):
    prop = EnumProperty("prop", node_publisher, {"on": Mode.ON})
    callback = Mock()
    prop.subscribe(callback)

    with pytest.raises(KeyError):
        prop.mqtt_received("ON")
    with pytest.raises(UnknownEnumValueError):
        prop.property_update_from_string("maybe")
    callback.assert_not_called()


def test_enum_update_with_unmapped_member_fails(publisher_fake, node_publisher):
    prop = EnumProperty("prop", node_publisher, {"on": Mode.ON})

    with pytest.raises(UnknownEnumValueError):
        prop.update(Mode.OFF)
    assert value_messages(publisher_fake) == []


def test_hsv_color(publisher_fake, node_publisher):
    prop = HSVColorProperty("prop", node_publisher)

    prop.update(HSV(120, 50, 75))

    assert prop.datatype == "color"
    assert prop.format == "hsv"
    assert value_messages(publisher_fake) == [("120,50,75", True)]
    assert prop.property_update_from_string("10,20,30").update == HSV(10, 20, 30)


def test_rgb_color(publisher_fake, node_publisher):
    prop = RGBColorProperty("prop", node_publisher)

    prop.update(RGB(255, 0, 16))
    prop.update(RGB(255, 0, 16))

    assert prop.format == "rgb"
    assert value_messages(publisher_fake) == [("255,0,16", True)]
    assert prop.property_update_from_string("1,2,3").update == RGB(1, 2, 3)


def test_color_parse_requires_three_components(node_publisher):
    prop = RGBColorProperty("prop", node_publisher)

    with pytest.raises(ValueError):
        prop.property_update_from_string("1,2")
    with pytest.raises(ValueError):
        prop.property_update_from_string("1,2,x")


def test_color_values_are_validated():
    with pytest.raises(ValueError):
        RGB(256, 0, 0)
    with pytest.raises(ValueError):
        HSV(0, 101, 0)
    assert HSV(360, 100, 100).as_tuple() == (360, 100, 100)


def test_topic_segments(publisher_fake):
    prop = StringProperty("prop", publisher_fake.publisher.child("dev").child("node"))

    assert prop.topic_segments == ["dev", "node", "prop"]


def test_subscriber_may_update_from_callback(publisher_fake, node_publisher):
    prop = StringProperty("prop", node_publisher)
    prop.subscribe(lambda update: update.property.update(update.update))

    prop.mqtt_received("echo")

    assert value_messages(publisher_fake) == [("echo", True)]


def test_concurrent_updates_publish_each_distinct_value_once(publisher_fake, node_publisher):
    prop = NumberProperty("prop", node_publisher)
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        for _ in range(100):
            prop.update(7)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert value_messages(publisher_fake) == [("7", True)]


def test_rejected_publish_keeps_value_pending():
    transport = Mock()
    transport.publish.return_value = False
    root = RootPublisher(transport)
    prop = StringProperty("prop", root.child("node"))

    prop.update("foo")
    transport.publish.return_value = True
    prop.update("foo")

    assert transport.publish.call_count == 2
    assert prop.last_value == "foo"


@pytest.mark.parametrize("value", [5.5, True, "5"])
def test_integer_property_rejects_other_types(publisher_fake, node_publisher, value):
    prop = NumberProperty("prop", node_publisher)

    with pytest.raises(InvalidValueError):
        prop.update(value)
    assert value_messages(publisher_fake) == []
    assert prop.last_value is None


def test_float_property_accepts_int_but_not_bool(publisher_fake, node_publisher):
    prop = FloatProperty("prop", node_publisher)

    with pytest.raises(ValueError):
        prop.update(False)
    prop.update(3)

    assert value_messages(publisher_fake) == [("3", True)]


def test_out_of_range_is_an_invalid_value(node_publisher):
    prop = NumberProperty("prop", node_publisher, range=(0, 10))

    with pytest.raises(InvalidValueError):
        prop.update(11)

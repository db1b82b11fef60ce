"""Tests for the demo device service and logging helpers."""

import json
import logging
import re
import sys
from pathlib import Path

from homie_mqtt.config import AppConfig, MQTTConfig
from homie_mqtt.device import RGB
from homie_mqtt.main import Mode, build_device
from homie_mqtt.utils.logger import JSONFormatter, get_logger, redact_sensitive, set_log_level


def make_device(publisher_fake):
    config = AppConfig(mqtt=MQTTConfig(), log_level="INFO", device_id="demo", device_name="Demo")
    dev = build_device(config)
    dev.bind(publisher_fake, "homie")
    return dev


def test_demo_device_layout(publisher_fake):
    dev = make_device(publisher_fake)

    dev.publish_config()

    assert ("homie/demo/$name", "Demo", True) in publisher_fake.messages
    assert ("homie/demo/controller/$properties", "label,level,setpoint,power,mode,color", True) \
        in publisher_fake.messages
    assert ("homie/demo/controller/mode/$format", "off,auto,manual", True) in publisher_fake.messages
    assert all(prop.settable for prop in dev.get_node("controller"))


def test_demo_device_echoes_set_commands(publisher_fake):
    dev = make_device(publisher_fake)

    dev.mqtt_received("controller", "level", "42")
    dev.mqtt_received("controller", "mode", "auto")
    dev.mqtt_received("controller", "color", "1,2,3")

    assert ("homie/demo/controller/level", "42", True) in publisher_fake.messages
    assert ("homie/demo/controller/mode", "auto", True) in publisher_fake.messages
    assert dev.find_property("controller", "mode").last_value is Mode.AUTO
    assert dev.find_property("controller", "color").last_value == RGB(1, 2, 3)


def test_json_formatter():
    record = logging.LogRecord("homie_mqtt.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert set(data) == {"timestamp", "level", "logger", "thread", "message"}


def test_json_formatter_includes_traceback():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("homie_mqtt.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    data = json.loads(JSONFormatter().format(record))

    assert "ValueError: boom" in data["exception"]


def test_set_log_level_applies_to_module_loggers():
    module_logger = get_logger("homie_mqtt.device.node")
    try:
        set_log_level("debug")
        assert module_logger.getEffectiveLevel() == logging.DEBUG
    finally:
        set_log_level("INFO")
    assert module_logger.getEffectiveLevel() == logging.INFO


def test_redact_sensitive():
    assert redact_sensitive({"password": "secret", "username": "user"}) == {
        "password": "***REDACTED***",
        "username": "user",
    }
    assert redact_sensitive({"password": None}) == {"password": None}


def test_package_readme_exists():
    root = Path(__file__).parent
    readme = re.search(r'^readme = "(.+)"$', (root / "pyproject.toml").read_text(), re.MULTILINE)

    assert readme is not None
    assert readme.group(1) == "README.md"
    assert (root / readme.group(1)).read_text().startswith("# homie-mqtt")

"""Utility modules for logging and error handling."""

from .errors import (
    ClientStateError,
    ConfigurationError,
    DuplicateIdError,
    HomieError,
    InvalidValueError,
    MQTTConnectionError,
    UnknownEnumValueError,
    UnknownTopicError,
    ValueOutOfRangeError,
)
from .logger import get_logger, redact_sensitive, set_log_level

__all__ = [
    "ClientStateError",
    "ConfigurationError",
    "DuplicateIdError",
    "HomieError",
    "InvalidValueError",
    "MQTTConnectionError",
    "UnknownEnumValueError",
    "UnknownTopicError",
    "ValueOutOfRangeError",
    "get_logger",
    "redact_sensitive",
    "set_log_level",
]

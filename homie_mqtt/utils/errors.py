"""Custom exception classes for the application."""


class HomieError(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationError(HomieError):
    """Invalid or missing configuration."""
    pass


class MQTTConnectionError(HomieError):
    """MQTT connection errors."""
    pass


class ClientStateError(HomieError, RuntimeError):
    """Client operation not allowed in its current state."""
    pass


class DuplicateIdError(HomieError, ValueError):
    """A node or property id is already registered under the same parent."""
    pass


class InvalidValueError(HomieError, ValueError):
    """Value of the wrong type for the property or color component."""
    pass


class ValueOutOfRangeError(InvalidValueError):
    """Numeric property value outside its configured range."""
    pass


class UnknownEnumValueError(HomieError, KeyError):
    """Inbound enum payload with no mapping entry."""
    pass


class UnknownTopicError(HomieError, LookupError):
    """Inbound message addressed to a node or property that does not exist."""
    pass

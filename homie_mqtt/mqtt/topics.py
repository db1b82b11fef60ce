"""Topic structure for the Homie convention."""

from typing import Optional, Tuple

SET_SUFFIX = "set"
STATE_ATTRIBUTE = "$state"


class HomieTopics:
    """
    Manages the Homie topic layout below a base topic.
    """

    def __init__(self, base_topic: str = "homie") -> None:
        self.base_topic: str = base_topic

    def device_topic(self, device_id: str) -> str:
        """Format: homie/{device_id}"""
        return f"{self.base_topic}/{device_id}"

    def state_topic(self, device_id: str) -> str:
        """Format: homie/{device_id}/$state"""
        return f"{self.base_topic}/{device_id}/{STATE_ATTRIBUTE}"

    def set_topic(self, device_id: str, node_id: str, property_id: str) -> str:
        """Format: homie/{device_id}/{node_id}/{property_id}/set"""
        return f"{self.base_topic}/{device_id}/{node_id}/{property_id}/{SET_SUFFIX}"

    def set_subscription_topic(self, device_id: str) -> str:
        """Subscribe to every property set topic: homie/{device_id}/+/+/set"""
        return f"{self.base_topic}/{device_id}/+/+/{SET_SUFFIX}"

    def parse_set_topic(self, topic: str) -> Optional[Tuple[str, str, str]]:
        """
        Parse a set topic to extract device, node and property ids.

        Returns:
            (device_id, node_id, property_id) or None if not a set topic

        Example:
            "homie/dev/light/power/set" -> ("dev", "light", "power")
        """
        prefix = f"{self.base_topic}/"
        if not topic.startswith(prefix):
            return None
        parts = topic[len(prefix):].split("/")
        if len(parts) == 4 and parts[3] == SET_SUFFIX and all(parts[:3]):
            return (parts[0], parts[1], parts[2])
        return None

"""
Real-time event type enumeration.
"""

from enum import StrEnum


class EventType(StrEnum):
    """Change events delivered by the push channel."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def parse(cls, raw: str) -> "EventType":
        """
        Parse a raw event type, accepting any letter case.

        Args:
            raw: Event type as delivered ("INSERT", "update", ...)

        Returns:
            Matching EventType

        Raises:
            ValueError: If the event type is unknown
        """
        return cls(str(raw).lower())

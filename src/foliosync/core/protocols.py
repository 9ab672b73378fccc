"""
Core type definitions and protocols.

This module defines shared protocols so the store and reconciler can work on
any collection item without importing the concrete domain models.
"""

from dataclasses import dataclass
from typing import Any, Protocol


class Identified(Protocol):
    """Protocol for anything carrying a stable string id."""

    @property
    def id(self) -> str: ...


@dataclass(frozen=True)
class ItemRef:
    """Bare reference to an item by id.

    Push channels usually deliver only the primary key of a deleted row,
    so delete events carry an ItemRef instead of a full item.
    """

    id: str


# Raw payloads exchanged with the remote store, push channel and local cache
Payload = dict[str, Any]

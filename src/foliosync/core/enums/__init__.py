"""
Core enumerations for the portfolio engine.

This module provides centralized enumerations for domain concepts
like trade actions, severities, rounding rules, and push events.
"""

from .actions import Priority, RoundingMode, Severity, TradeAction
from .events import EventType

__all__ = ["TradeAction", "Severity", "Priority", "RoundingMode", "EventType"]

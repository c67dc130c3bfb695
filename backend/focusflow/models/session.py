# backend/focusflow/models/session.py

from enum import Enum


class TimerMode(str, Enum):
    """The three countdown modes. Values are the wire/DB names."""
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


class EnergyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

# backend/focusflow/models/settings.py

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from focusflow.models.session import TimerMode


class ThemeEnum(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    NATURE = "nature"
    SPACE = "space"


# Setting key -> the mode whose duration it controls.
DURATION_KEYS = {
    "focus_minutes": TimerMode.FOCUS,
    "short_break_minutes": TimerMode.SHORT_BREAK,
    "long_break_minutes": TimerMode.LONG_BREAK,
}


class SessionSettings(BaseModel):
    """
    Tunable durations of the focus cycle, one instance per user.
    Bounds follow the ranges the settings panel allows.
    """
    focus_minutes: int = Field(25, ge=1, le=60)
    short_break_minutes: int = Field(5, ge=1, le=30)
    long_break_minutes: int = Field(15, ge=1, le=60)
    sessions_until_long_break: int = Field(4, ge=1, le=10)
    sound_enabled: bool = True
    preferred_theme: ThemeEnum = ThemeEnum.LIGHT

    model_config = ConfigDict(validate_assignment=True, use_enum_values=False)

    def minutes_for(self, mode: TimerMode) -> int:
        if mode == TimerMode.FOCUS:
            return self.focus_minutes
        if mode == TimerMode.SHORT_BREAK:
            return self.short_break_minutes
        return self.long_break_minutes

    def seconds_for(self, mode: TimerMode) -> int:
        return self.minutes_for(mode) * 60

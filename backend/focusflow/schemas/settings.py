# backend/focusflow/schemas/settings.py

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from focusflow.models.settings import ThemeEnum


class SettingsUpdate(BaseModel):
    """
    [request] PATCH /focus/settings
    Partial update; omitted fields keep their current value.
    """
    model_config = ConfigDict(extra="forbid")

    focus_minutes: Optional[int] = Field(None, ge=1, le=60)
    short_break_minutes: Optional[int] = Field(None, ge=1, le=30)
    long_break_minutes: Optional[int] = Field(None, ge=1, le=60)
    sessions_until_long_break: Optional[int] = Field(None, ge=1, le=10)
    sound_enabled: Optional[bool] = None
    preferred_theme: Optional[ThemeEnum] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

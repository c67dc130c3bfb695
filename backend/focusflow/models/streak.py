# backend/focusflow/models/streak.py

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class StreakRecord(BaseModel):
    """
    Streak state kept in 'focus_streaks'. The store is authoritative; the
    coordinator only reads it (live) or bumps a local copy (demo).
    """
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_focus_date: Optional[date] = None

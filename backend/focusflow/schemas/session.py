# backend/focusflow/schemas/session.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from focusflow.models.session import EnergyLevel, TimerMode

# --- Request schemas ---

class SessionCreate(BaseModel):
    """
    A completed interval handed to the gateway's record_session().
    duration is in seconds.
    """
    duration: int = Field(..., ge=0)
    mode: TimerMode
    completed: bool = True
    energy_level: Optional[EnergyLevel] = None

# --- Response schemas ---

class SessionRead(BaseModel):
    """[response] GET /focus/sessions"""
    id: str
    user_id: str
    duration: int
    mode: TimerMode
    completed: bool
    energy_level: Optional[EnergyLevel] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

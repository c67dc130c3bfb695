# backend/focusflow/schemas/focus.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from focusflow.models.session import EnergyLevel, TimerMode
from focusflow.models.settings import SessionSettings

# --- Request schemas ---

class ModeRequest(BaseModel):
    """[request] POST /focus/mode"""
    mode: TimerMode


class EnergyRequest(BaseModel):
    """[request] POST /focus/energy"""
    level: EnergyLevel


class TrackRequest(BaseModel):
    """[request] POST /focus/audio/track"""
    track_id: str = Field(..., min_length=1)


class VolumeRequest(BaseModel):
    """[request] POST /focus/audio/volume"""
    volume: float = Field(..., ge=0.0, le=1.0)


class LoopingRequest(BaseModel):
    """[request] POST /focus/audio/looping"""
    looping: bool

# --- Response schemas ---

class AudioState(BaseModel):
    state: str  # idle | playing
    track_id: Optional[str] = None
    volume: float
    looping: bool
    custom_tracks: List[str] = Field(default_factory=list)


class CoordinatorState(BaseModel):
    """
    [response] Read-only view the UI renders from.
    """
    mode: TimerMode
    seconds_remaining: int
    is_running: bool
    sessions_completed_in_cycle: int
    streak: int
    is_demo_mode: bool
    energy_level: EnergyLevel
    settings: SessionSettings
    audio: AudioState


class ToastRead(BaseModel):
    title: str
    description: str
    variant: str
    created_at: datetime


class UploadedTrackRead(BaseModel):
    """[response] POST /focus/audio/upload; the server-side path stays private."""
    id: str
    display_name: str
    content_type: str

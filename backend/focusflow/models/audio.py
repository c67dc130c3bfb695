# backend/focusflow/models/audio.py

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AudioPreference(BaseModel):
    """Persisted ambient audio preference (lives on the settings document)."""
    selected_track_id: Optional[str] = None
    volume: float = Field(0.5, ge=0.0, le=1.0)
    looping: bool = True

    model_config = ConfigDict(validate_assignment=True)


class AmbientTrack(BaseModel):
    """A built-in ambient track shipped with the app."""
    id: str
    name: str
    filename: str


class CustomAudioAsset(BaseModel):
    """
    A user upload registered for this process only. Never persisted; only its
    id may end up in AudioPreference.selected_track_id.
    """
    id: str
    display_name: str
    path: Path
    content_type: str

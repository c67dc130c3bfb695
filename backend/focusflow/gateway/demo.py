# backend/focusflow/gateway/demo.py
from typing import Any, Dict, List, Optional

from focusflow.gateway.base import PersistenceGateway
from focusflow.models.audio import AudioPreference
from focusflow.models.session import EnergyLevel, TimerMode
from focusflow.models.settings import SessionSettings
from focusflow.models.streak import StreakRecord
from focusflow.schemas.session import SessionRead


class DemoGateway(PersistenceGateway):
    """
    Used when the remote store is unreachable or not set up.
    Values live on the instance only, so a new instance starts from defaults.
    """

    is_demo = True

    def __init__(self):
        self._settings = SessionSettings()
        self._audio = AudioPreference()
        self._streak = StreakRecord()

    async def get_settings(self) -> SessionSettings:
        return self._settings.model_copy()

    async def update_settings(self, changes: Dict[str, Any]) -> SessionSettings:
        updated = self._settings.model_copy()
        for key, value in changes.items():
            setattr(updated, key, value)
        self._settings = updated
        return updated.model_copy()

    async def get_streak(self) -> StreakRecord:
        return self._streak.model_copy()

    async def record_session(
        self,
        duration: int,
        mode: TimerMode,
        energy_level: Optional[EnergyLevel] = None,
    ) -> Optional[SessionRead]:
        # nothing to record against; the tracker keeps the streak locally
        return None

    async def get_audio_preference(self) -> AudioPreference:
        return self._audio.model_copy()

    async def update_audio_preference(self, preference: AudioPreference) -> AudioPreference:
        self._audio = preference.model_copy()
        return self._audio.model_copy()

    async def get_recent_sessions(self, limit: int = 10) -> List[SessionRead]:
        return []

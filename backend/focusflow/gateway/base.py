# backend/focusflow/gateway/base.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from focusflow.models.audio import AudioPreference
from focusflow.models.session import EnergyLevel, TimerMode
from focusflow.models.settings import SessionSettings
from focusflow.models.streak import StreakRecord
from focusflow.schemas.session import SessionRead


class PersistenceGateway(ABC):
    """
    Everything the coordinator persists goes through one of two gateways,
    chosen once at startup by the capability probe: LiveGateway (MongoDB) or
    DemoGateway (in memory).
    """

    is_demo: bool = False

    @abstractmethod
    async def get_settings(self) -> SessionSettings: ...

    @abstractmethod
    async def update_settings(self, changes: Dict[str, Any]) -> SessionSettings: ...

    @abstractmethod
    async def get_streak(self) -> StreakRecord: ...

    @abstractmethod
    async def record_session(
        self,
        duration: int,
        mode: TimerMode,
        energy_level: Optional[EnergyLevel] = None,
    ) -> Optional[SessionRead]:
        """Store a completed interval. Returns None when the write is skipped."""

    @abstractmethod
    async def get_audio_preference(self) -> AudioPreference: ...

    @abstractmethod
    async def update_audio_preference(self, preference: AudioPreference) -> AudioPreference: ...

    @abstractmethod
    async def get_recent_sessions(self, limit: int = 10) -> List[SessionRead]: ...

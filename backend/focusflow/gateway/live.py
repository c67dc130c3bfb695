# backend/focusflow/gateway/live.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from pymongo.errors import OperationFailure, PyMongoError

from focusflow.core.errors import AuthError, StoreConnectionError
from focusflow.crud import sessions as session_crud
from focusflow.crud import settings as settings_crud
from focusflow.crud import streaks as streak_crud
from focusflow.gateway.base import PersistenceGateway
from focusflow.models.audio import AudioPreference
from focusflow.models.session import EnergyLevel, TimerMode
from focusflow.models.settings import SessionSettings
from focusflow.models.streak import StreakRecord
from focusflow.schemas.session import SessionCreate, SessionRead

logger = logging.getLogger(__name__)

# MongoDB server codes for "not allowed"
_AUTH_CODES = {13, 18}  # Unauthorized, AuthenticationFailed


@asynccontextmanager
async def _store_errors(action: str):
    """
    Translate driver failures into the coordinator's error taxonomy.
    """
    try:
        yield
    except OperationFailure as exc:
        if exc.code in _AUTH_CODES:
            raise AuthError(f"{action}: {exc}") from exc
        raise StoreConnectionError(f"{action}: {exc}") from exc
    except PyMongoError as exc:
        raise StoreConnectionError(f"{action}: {exc}") from exc
    except ValidationError as exc:
        # stored document does not fit the model
        raise StoreConnectionError(f"{action}: unreadable document: {exc}") from exc


class LiveGateway(PersistenceGateway):
    """MongoDB-backed gateway bound to one authenticated user."""

    is_demo = False

    def __init__(self, user_id: str):
        self.user_id = user_id

    async def get_settings(self) -> SessionSettings:
        async with _store_errors("get_settings"):
            return await settings_crud.get_settings(self.user_id)

    async def update_settings(self, changes: Dict[str, Any]) -> SessionSettings:
        async with _store_errors("update_settings"):
            return await settings_crud.update_settings(self.user_id, changes)

    async def get_streak(self) -> StreakRecord:
        async with _store_errors("get_streak"):
            return await streak_crud.get_streak(self.user_id)

    async def record_session(
        self,
        duration: int,
        mode: TimerMode,
        energy_level: Optional[EnergyLevel] = None,
    ) -> Optional[SessionRead]:
        data = SessionCreate(duration=duration, mode=mode, energy_level=energy_level)
        async with _store_errors("record_session"):
            created = await session_crud.record_session(self.user_id, data)
        logger.debug("Recorded %s session %s (%ss)", mode.value, created.id, duration)
        return created

    async def get_audio_preference(self) -> AudioPreference:
        async with _store_errors("get_audio_preference"):
            return await settings_crud.get_audio_preference(self.user_id)

    async def update_audio_preference(self, preference: AudioPreference) -> AudioPreference:
        async with _store_errors("update_audio_preference"):
            return await settings_crud.update_audio_preference(self.user_id, preference)

    async def get_recent_sessions(self, limit: int = 10) -> List[SessionRead]:
        async with _store_errors("get_recent_sessions"):
            return await session_crud.get_sessions(self.user_id, limit=limit)

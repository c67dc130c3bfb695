# backend/focusflow/timer/streak.py
import logging
from typing import Optional

from focusflow.core.errors import FocusError
from focusflow.core.notifier import ToastNotifier
from focusflow.gateway.base import PersistenceGateway
from focusflow.models.session import EnergyLevel, TimerMode

logger = logging.getLogger(__name__)


class StreakTracker:
    """
    Records completed intervals and keeps the displayed streak.

    Demo mode has no authority to contradict, so a completed focus interval
    bumps the streak locally. In live mode the store owns the streak: we write
    the session, then re-read the value. A failed write leaves the displayed
    streak as it was.
    """

    def __init__(self, gateway: PersistenceGateway, notifier: Optional[ToastNotifier] = None):
        self.gateway = gateway
        self.notifier = notifier
        self.current_streak = 0

    async def load(self) -> int:
        try:
            record = await self.gateway.get_streak()
        except FocusError as exc:
            logger.warning("Could not load streak: %s", exc)
            return self.current_streak
        self.current_streak = record.current_streak
        return self.current_streak

    async def on_complete(
        self,
        mode: TimerMode,
        duration: int,
        energy_level: Optional[EnergyLevel] = None,
    ) -> int:
        if self.gateway.is_demo:
            if mode == TimerMode.FOCUS:
                self.current_streak += 1
            return self.current_streak

        try:
            await self.gateway.record_session(duration, mode, energy_level)
        except FocusError as exc:
            logger.error("Saving %s session failed: %s", mode.value, exc)
            if self.notifier is not None:
                self.notifier.error(
                    "Error saving session",
                    "Your session was completed but could not be saved.",
                )
            return self.current_streak

        if mode == TimerMode.FOCUS:
            await self.load()
        return self.current_streak

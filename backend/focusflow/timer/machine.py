# backend/focusflow/timer/machine.py
from dataclasses import dataclass
from typing import Callable, Optional

from focusflow.models.session import TimerMode
from focusflow.models.settings import DURATION_KEYS, SessionSettings


@dataclass
class MachineSnapshot:
    mode: TimerMode
    seconds_remaining: int
    is_running: bool
    sessions_completed_in_cycle: int


class SessionStateMachine:
    """
    Pure countdown engine: no I/O, no clock.
    The coordinator calls tick() once per second while running.

    Transitions on completion:
        focus -> shortBreak, or longBreak every N completed focus intervals
        shortBreak / longBreak -> focus
    The machine always stops after a completion; the user starts the next one.
    """

    def __init__(
        self,
        settings: Optional[SessionSettings] = None,
        on_complete: Optional[Callable[[TimerMode], None]] = None,
    ):
        self.settings = settings or SessionSettings()
        self.on_complete = on_complete

        self.mode = TimerMode.FOCUS
        self.seconds_remaining = self.settings.seconds_for(self.mode)
        self.is_running = False
        self.sessions_completed_in_cycle = 0

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(
            mode=self.mode,
            seconds_remaining=self.seconds_remaining,
            is_running=self.is_running,
            sessions_completed_in_cycle=self.sessions_completed_in_cycle,
        )

    @property
    def duration(self) -> int:
        """Full length of the current mode in seconds."""
        return self.settings.seconds_for(self.mode)

    # ----- controls -----
    def start(self) -> bool:
        """Returns True if the machine was not already running."""
        if self.is_running:
            return False
        self.is_running = True
        return True

    def pause(self) -> bool:
        if not self.is_running:
            return False
        self.is_running = False
        return True

    def reset(self) -> None:
        self.seconds_remaining = self.duration
        self.is_running = False

    def set_mode(self, mode: TimerMode) -> None:
        # manual switch: the cycle counter is left alone
        self.mode = TimerMode(mode)
        self.seconds_remaining = self.duration
        self.is_running = False

    def apply_settings(self, settings: SessionSettings, changed_key: Optional[str] = None) -> None:
        """
        Swap in new settings. If the changed duration is the current mode's,
        the countdown jumps to the new full duration, even mid-session.
        """
        self.settings = settings
        if changed_key is not None and DURATION_KEYS.get(changed_key) == self.mode:
            self.seconds_remaining = self.duration

    # ----- countdown -----
    def tick(self) -> Optional[TimerMode]:
        """
        Advance one second. The tick that reaches 0 finishes the interval:
        returns the completed mode, otherwise None.
        """
        if not self.is_running:
            return None

        self.seconds_remaining = max(self.seconds_remaining - 1, 0)
        if self.seconds_remaining > 0:
            return None

        completed = self.mode
        self.is_running = False
        if self.on_complete is not None:
            self.on_complete(completed)
        self._advance(completed)
        return completed

    def _advance(self, completed: TimerMode) -> None:
        if completed == TimerMode.FOCUS:
            self.sessions_completed_in_cycle += 1
            if self.sessions_completed_in_cycle % self.settings.sessions_until_long_break == 0:
                self.mode = TimerMode.LONG_BREAK
            else:
                self.mode = TimerMode.SHORT_BREAK
        else:
            self.mode = TimerMode.FOCUS
        self.seconds_remaining = self.duration

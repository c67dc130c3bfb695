# backend/focusflow/audio/chime.py
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from focusflow.core.notifier import ToastNotifier
from focusflow.models.session import TimerMode

logger = logging.getLogger(__name__)

COMPLETION_MESSAGES = {
    TimerMode.FOCUS: ("Focus session complete", "Time for a break!"),
    TimerMode.SHORT_BREAK: ("Break over", "Back to focus now."),
    TimerMode.LONG_BREAK: ("Long break over", "Ready for a new cycle."),
}


class ChimePlayer(ABC):
    """One-shot sound, independent of the ambient channel."""

    @abstractmethod
    def play(self, source: Path) -> None: ...


class SilentChime(ChimePlayer):
    def __init__(self):
        self.played: List[Path] = []

    def play(self, source: Path) -> None:
        self.played.append(Path(source))


class CompletionSignal:
    """
    Fired once per tick-driven completion. The visual toast always goes out;
    the chime only when sound is enabled.
    """

    def __init__(
        self,
        chime: ChimePlayer,
        bell_path: Path,
        notifier: Optional[ToastNotifier] = None,
    ):
        self.chime = chime
        self.bell_path = Path(bell_path)
        self.notifier = notifier
        self.fired = 0

    def fire(self, mode: TimerMode, sound_enabled: bool) -> bool:
        """Returns True if the chime was played."""
        self.fired += 1

        if self.notifier is not None:
            title, description = COMPLETION_MESSAGES[mode]
            self.notifier.notify(title, description)

        if not sound_enabled:
            return False
        try:
            self.chime.play(self.bell_path)
        except Exception as exc:
            # a missing bell must not break the completion path
            logger.warning("Completion chime failed: %s", exc)
            return False
        return True

# backend/focusflow/audio/channel.py
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from focusflow.core.errors import PlaybackError


class AudioChannel(ABC):
    """
    The single ambient playback channel. One source at a time: load() replaces
    whatever was attached, so callers stop/release first.
    """

    @abstractmethod
    def load(self, source: Path) -> None:
        """Attach a source. Raises PlaybackError if it cannot be opened."""

    @abstractmethod
    def play(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def release(self) -> None:
        """Detach the current source and free its handle."""

    @abstractmethod
    def set_volume(self, volume: float) -> None: ...

    @abstractmethod
    def set_looping(self, looping: bool) -> None: ...

    @property
    @abstractmethod
    def is_playing(self) -> bool: ...


class SilentChannel(AudioChannel):
    """
    Headless channel: keeps state, produces no sound. Used when no audio
    backend is configured and in tests. `events` is the call log.
    """

    def __init__(self):
        self.source: Optional[Path] = None
        self.volume = 0.5
        self.looping = True
        self._playing = False
        self.events: List[Tuple[str, Optional[str]]] = []

    def load(self, source: Path) -> None:
        self.source = Path(source)
        self.events.append(("load", self.source.name))

    def play(self) -> None:
        if self.source is None:
            raise PlaybackError("No source loaded")
        self._playing = True
        self.events.append(("play", self.source.name))

    def stop(self) -> None:
        if self._playing:
            self.events.append(("stop", self.source.name if self.source else None))
        self._playing = False

    def release(self) -> None:
        if self.source is not None:
            self.events.append(("release", self.source.name))
        self.source = None
        self._playing = False

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    def set_looping(self, looping: bool) -> None:
        self.looping = looping

    @property
    def is_playing(self) -> bool:
        return self._playing

# backend/focusflow/audio/pygame_backend.py
"""
Real playback through pygame's mixer. pygame.mixer.music is a single
streamed channel, which is exactly the ambient channel; the chime uses a
regular Sound on its own mixer channel so the two never interfere.
"""
import logging
from pathlib import Path
from typing import Optional

import pygame

from focusflow.audio.channel import AudioChannel
from focusflow.audio.chime import ChimePlayer
from focusflow.core.errors import PlaybackError

logger = logging.getLogger(__name__)


def _ensure_mixer() -> None:
    try:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
    except pygame.error as exc:
        raise PlaybackError(f"Audio device unavailable: {exc}") from exc


class PygameChannel(AudioChannel):

    def __init__(self):
        self.source: Optional[Path] = None
        self.volume = 0.5
        self.looping = True
        self._playing = False
        # get_pos() only counts time since the last play(); _offset is where
        # in the file that play() started
        self._offset = 0.0
        self._length: Optional[float] = None

    def load(self, source: Path) -> None:
        source = Path(source)
        if not source.is_file():
            raise PlaybackError(f"Sound file not found: {source}")
        _ensure_mixer()
        try:
            pygame.mixer.music.load(str(source))
        except pygame.error as exc:
            raise PlaybackError(f"Could not load {source.name}: {exc}") from exc
        self.source = source
        self._offset = 0.0
        self._length = None

    def play(self) -> None:
        if self.source is None:
            raise PlaybackError("No source loaded")
        try:
            pygame.mixer.music.set_volume(self.volume)
            pygame.mixer.music.play(loops=-1 if self.looping else 0)
        except pygame.error as exc:
            raise PlaybackError(f"Could not play {self.source.name}: {exc}") from exc
        self._offset = 0.0
        self._playing = True

    def stop(self) -> None:
        if self._playing and pygame.mixer.get_init():
            pygame.mixer.music.stop()
        self._playing = False

    def release(self) -> None:
        self.stop()
        if self.source is not None and pygame.mixer.get_init():
            pygame.mixer.music.unload()
        self.source = None
        self._length = None

    def set_volume(self, volume: float) -> None:
        self.volume = volume
        if self._playing:
            pygame.mixer.music.set_volume(volume)

    def set_looping(self, looping: bool) -> None:
        if looping == self.looping:
            return
        position = self.position() if self._playing else 0.0
        self.looping = looping
        if not self._playing:
            return
        # the loop count is fixed per play() call, so restart in place
        loops = -1 if looping else 0
        try:
            pygame.mixer.music.play(loops=loops, start=position)
        except (pygame.error, NotImplementedError):
            # format without seeking
            pygame.mixer.music.play(loops=loops)
            position = 0.0
        self._offset = position

    def position(self) -> float:
        """Seconds into the file, across in-place restarts and loop wraps."""
        elapsed = self._offset + max(0, pygame.mixer.music.get_pos()) / 1000.0
        length = self._track_length()
        if not length:
            return 0.0
        if self.looping:
            return elapsed % length
        return min(elapsed, length)

    def _track_length(self) -> float:
        if self._length is None and self.source is not None:
            try:
                self._length = pygame.mixer.Sound(str(self.source)).get_length()
            except pygame.error as exc:
                logger.warning("Could not read length of %s: %s", self.source.name, exc)
                self._length = 0.0
        return self._length or 0.0

    @property
    def is_playing(self) -> bool:
        return self._playing and pygame.mixer.music.get_busy()


class PygameChime(ChimePlayer):

    def __init__(self):
        self._sound: Optional[pygame.mixer.Sound] = None
        self._source: Optional[Path] = None

    def play(self, source: Path) -> None:
        source = Path(source)
        _ensure_mixer()
        if self._sound is None or self._source != source:
            try:
                self._sound = pygame.mixer.Sound(str(source))
            except (pygame.error, FileNotFoundError) as exc:
                raise PlaybackError(f"Could not load chime {source}: {exc}") from exc
            self._source = source
        self._sound.play()

import pytest

pygame = pytest.importorskip("pygame")

from focusflow.audio import pygame_backend  # noqa: E402
from focusflow.core.errors import PlaybackError  # noqa: E402


class FakeMusic:
    """pygame.mixer.music stand-in; get_pos is ms since the last play()."""

    def __init__(self):
        self.plays = []
        self.pos_ms = 0

    def load(self, filename):
        self.loaded = filename

    def unload(self):
        self.loaded = None

    def play(self, loops=0, start=0.0):
        self.plays.append((loops, start))
        self.pos_ms = 0

    def stop(self):
        pass

    def set_volume(self, volume):
        self.volume = volume

    def get_pos(self):
        return self.pos_ms

    def get_busy(self):
        return True


class FakeSound:
    def __init__(self, filename):
        self.filename = filename

    def get_length(self):
        return 10.0


@pytest.fixture
def music(monkeypatch):
    fake = FakeMusic()
    monkeypatch.setattr(pygame.mixer, "music", fake)
    monkeypatch.setattr(pygame.mixer, "get_init", lambda: (44100, -16, 2))
    monkeypatch.setattr(pygame.mixer, "Sound", FakeSound)
    return fake


@pytest.fixture
def track(tmp_path):
    path = tmp_path / "rain.ogg"
    path.write_bytes(b"OggS")
    return path


def test_looping_toggles_keep_position_across_restarts(music, track):
    channel = pygame_backend.PygameChannel()
    channel.load(track)
    channel.play()
    assert music.plays == [(-1, 0.0)]

    music.pos_ms = 3000
    channel.set_looping(False)
    assert music.plays[-1] == (0, 3.0)

    # 2 s after the restart is 5 s into the file, not 2 s
    music.pos_ms = 2000
    channel.set_looping(True)
    assert music.plays[-1] == (-1, 5.0)


def test_looping_off_after_wrap_starts_inside_the_track(music, track):
    channel = pygame_backend.PygameChannel()
    channel.load(track)
    channel.play()

    music.pos_ms = 23500  # two full passes of a 10 s track
    channel.set_looping(False)
    assert music.plays[-1] == (0, 3.5)


def test_looping_change_while_stopped_waits_for_next_play(music, track):
    channel = pygame_backend.PygameChannel()
    channel.load(track)
    channel.set_looping(False)
    assert music.plays == []

    channel.play()
    assert music.plays == [(0, 0.0)]


def test_loading_missing_file_is_a_playback_error(music, tmp_path):
    channel = pygame_backend.PygameChannel()
    with pytest.raises(PlaybackError):
        channel.load(tmp_path / "missing.mp3")
    assert channel.source is None

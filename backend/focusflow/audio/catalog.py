# backend/focusflow/audio/catalog.py
from pathlib import Path
from typing import Dict, List, Union

from focusflow.core.errors import PlaybackError
from focusflow.models.audio import AmbientTrack, CustomAudioAsset

CUSTOM_PREFIX = "custom-"

BUILTIN_TRACKS: Dict[str, AmbientTrack] = {
    t.id: t
    for t in (
        AmbientTrack(id="rain", name="Rainfall", filename="rain.mp3"),
        AmbientTrack(id="forest", name="Forest", filename="forest.mp3"),
        AmbientTrack(id="cafe", name="Café", filename="cafe.mp3"),
        AmbientTrack(id="waves", name="Ocean Waves", filename="waves.mp3"),
        AmbientTrack(id="whitenoise", name="White Noise", filename="whitenoise.mp3"),
    )
}


class TrackCatalog:
    """
    Resolves track ids to playable files: built-in tracks under
    <sounds_dir>/ambient, plus uploads registered during this process.
    """

    def __init__(self, sounds_dir: Union[str, Path] = "sounds"):
        self.sounds_dir = Path(sounds_dir)
        self._custom: Dict[str, CustomAudioAsset] = {}

    def register(self, asset: CustomAudioAsset) -> None:
        self._custom[asset.id] = asset

    @property
    def custom_assets(self) -> List[CustomAudioAsset]:
        return list(self._custom.values())

    def resolve(self, track_id: str) -> Path:
        if track_id in BUILTIN_TRACKS:
            return self.sounds_dir / "ambient" / BUILTIN_TRACKS[track_id].filename
        if track_id in self._custom:
            return self._custom[track_id].path
        if track_id.startswith(CUSTOM_PREFIX):
            # uploads do not survive a restart
            raise PlaybackError(f"Uploaded track {track_id!r} is no longer available")
        raise PlaybackError(f"Unknown ambient track {track_id!r}")

    def clear_custom(self) -> None:
        self._custom.clear()

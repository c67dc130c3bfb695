# backend/focusflow/audio/coordinator.py
import asyncio
import logging
import mimetypes
import uuid
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Optional, Set

from pydantic import ValidationError

from focusflow.audio.catalog import CUSTOM_PREFIX, TrackCatalog
from focusflow.audio.channel import AudioChannel
from focusflow.core.errors import FocusError, InvalidSettingError, InvalidUploadError, PlaybackError
from focusflow.core.notifier import ToastNotifier
from focusflow.gateway.base import PersistenceGateway
from focusflow.models.audio import AudioPreference, CustomAudioAsset

logger = logging.getLogger(__name__)


class AmbientAudioCoordinator:
    """
    Owns the ambient channel: idle -> playing(track_id) -> idle.

    Runs independently of the countdown. Track selection is persisted right
    away; volume/looping changes go through a single debounced write slot so
    a dragged slider produces one write with the final value.
    """

    def __init__(
        self,
        channel: AudioChannel,
        catalog: TrackCatalog,
        gateway: PersistenceGateway,
        notifier: Optional[ToastNotifier] = None,
        debounce_seconds: float = 0.5,
    ):
        self.channel = channel
        self.catalog = catalog
        self.gateway = gateway
        self.notifier = notifier
        self.debounce_seconds = debounce_seconds

        self.preference = AudioPreference()
        self.playing_track_id: Optional[str] = None

        self._pending_write: Optional[asyncio.Task] = None
        self._writes: Set[asyncio.Task] = set()
        self._upload_dir: Optional[TemporaryDirectory] = None

    @property
    def state(self) -> str:
        return "playing" if self.playing_track_id else "idle"

    # ----- startup -----
    def restore(self, preference: AudioPreference, sound_enabled: bool) -> None:
        """
        Apply the persisted preference and resume the last track if sound is
        on. Failure here only leaves the channel idle.
        """
        self.preference = preference.model_copy()
        self.channel.set_volume(self.preference.volume)
        self.channel.set_looping(self.preference.looping)

        track_id = self.preference.selected_track_id
        if not track_id or not sound_enabled:
            return
        try:
            self._play(track_id)
        except PlaybackError as exc:
            self.preference.selected_track_id = None
            logger.warning("Could not resume ambient track %r: %s", track_id, exc)
            if self.notifier is not None:
                self.notifier.error("Ambient sound unavailable", str(exc))

    # ----- user actions -----
    def select_track(self, track_id: str) -> Optional[str]:
        """
        Play track_id, or stop if it is the one already playing.
        Returns the playing track id (None when toggled off).
        Raises PlaybackError and stays idle if the track cannot be played.
        """
        if track_id == self.playing_track_id:
            self._stop()
            self.preference.selected_track_id = None
            self._persist_now()
            return None

        try:
            self._play(track_id)
        except PlaybackError:
            # the previous track was stopped as well
            if self.preference.selected_track_id is not None:
                self.preference.selected_track_id = None
                self._persist_now()
            raise
        self.preference.selected_track_id = track_id
        self._persist_now()
        return track_id

    def set_volume(self, volume: float) -> float:
        try:
            self.preference.volume = volume
        except ValidationError as exc:
            raise InvalidSettingError(f"volume must be between 0 and 1, got {volume!r}") from exc
        if self.playing_track_id:
            self.channel.set_volume(self.preference.volume)
        self._schedule_persist()
        return self.preference.volume

    def set_looping(self, looping: bool) -> bool:
        self.preference.looping = bool(looping)
        if self.playing_track_id:
            self.channel.set_looping(self.preference.looping)
        self._schedule_persist()
        return self.preference.looping

    def register_upload(
        self,
        filename: str,
        content_type: Optional[str],
        data: bytes,
    ) -> CustomAudioAsset:
        """
        Keep an uploaded audio file for this process and start playing it.
        Non-audio files raise InvalidUploadError before anything changes.
        """
        filename = Path(filename or "upload").name
        content_type = content_type or mimetypes.guess_type(filename)[0] or ""
        if not content_type.startswith("audio/"):
            raise InvalidUploadError(f"{filename!r} is not an audio file ({content_type or 'unknown type'})")

        asset_id = f"{CUSTOM_PREFIX}{uuid.uuid4().hex[:7]}"
        path = Path(self._uploads_dir()) / f"{asset_id}{Path(filename).suffix}"
        path.write_bytes(data)

        asset = CustomAudioAsset(
            id=asset_id,
            display_name=Path(filename).stem or asset_id,
            path=path,
            content_type=content_type,
        )
        self.catalog.register(asset)
        logger.info("Registered upload %s (%s)", asset.id, asset.display_name)

        self.select_track(asset.id)
        return asset

    # ----- teardown -----
    async def close(self) -> None:
        if self._pending_write is not None:
            self._pending_write.cancel()
            self._pending_write = None
        if self._writes:
            await asyncio.gather(*self._writes, return_exceptions=True)

        self._stop()
        self.catalog.clear_custom()
        if self._upload_dir is not None:
            self._upload_dir.cleanup()
            self._upload_dir = None

    # ----- internals -----
    def _play(self, track_id: str) -> None:
        # one source at a time: detach the old handle before attaching the new
        self._stop()
        try:
            source = self.catalog.resolve(track_id)
            self.channel.load(source)
            self.channel.set_volume(self.preference.volume)
            self.channel.set_looping(self.preference.looping)
            self.channel.play()
        except PlaybackError:
            self.channel.release()
            raise
        self.playing_track_id = track_id
        logger.info("Ambient track %s playing", track_id)

    def _stop(self) -> None:
        if self.playing_track_id is not None:
            logger.info("Ambient track %s stopped", self.playing_track_id)
        self.channel.stop()
        self.channel.release()
        self.playing_track_id = None

    def _uploads_dir(self) -> str:
        if self._upload_dir is None:
            self._upload_dir = TemporaryDirectory(prefix="focusflow-audio-")
        return self._upload_dir.name

    def _schedule_persist(self) -> None:
        if self._pending_write is not None and not self._pending_write.done():
            self._pending_write.cancel()
        self._pending_write = asyncio.get_running_loop().create_task(self._persist_later())

    async def _persist_later(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._pending_write = None
        self._spawn_write()

    def _persist_now(self) -> None:
        if self._pending_write is not None:
            self._pending_write.cancel()
            self._pending_write = None
        self._spawn_write()

    def _spawn_write(self) -> None:
        task = asyncio.get_running_loop().create_task(self._write(self.preference.model_copy()))
        self._writes.add(task)
        task.add_done_callback(self._writes.discard)

    async def _write(self, preference: AudioPreference) -> None:
        try:
            await self.gateway.update_audio_preference(preference)
        except FocusError as exc:
            logger.error("Saving audio preference failed: %s", exc)

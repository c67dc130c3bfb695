# backend/focusflow/coordinator.py
"""
Focus session coordinator: the object the UI talks to.

Wires the pieces together:
- a capability probe picks the persistence gateway (live or demo), once
- SessionStateMachine holds the countdown; an asyncio task ticks it at 1 Hz
  while running and is cancelled whenever the machine stops
- on completion: CompletionSignal fires, StreakTracker records in the
  background, the machine has already moved to the next mode
- AmbientAudioCoordinator runs beside the countdown, driven by the user

Persistence never blocks a tick: every write is a background task and every
gateway error ends up as a toast.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from pydantic import ValidationError

from focusflow.audio.catalog import TrackCatalog
from focusflow.audio.channel import AudioChannel, SilentChannel
from focusflow.audio.chime import ChimePlayer, CompletionSignal, SilentChime
from focusflow.audio.coordinator import AmbientAudioCoordinator
from focusflow.core.config import settings as app_settings
from focusflow.core.errors import FocusError, InvalidSettingError, InvalidUploadError, PlaybackError
from focusflow.core.notifier import ToastNotifier
from focusflow.gateway.base import PersistenceGateway
from focusflow.gateway.probe import ProbeResult, select_gateway
from focusflow.models.audio import CustomAudioAsset
from focusflow.models.session import EnergyLevel, TimerMode
from focusflow.models.settings import SessionSettings
from focusflow.schemas.focus import AudioState, CoordinatorState
from focusflow.schemas.session import SessionRead
from focusflow.timer.machine import SessionStateMachine
from focusflow.timer.streak import StreakTracker

logger = logging.getLogger(__name__)


class FocusCoordinator:

    def __init__(
        self,
        gateway: Optional[PersistenceGateway] = None,
        *,
        access_token: Optional[str] = None,
        channel: Optional[AudioChannel] = None,
        chime: Optional[ChimePlayer] = None,
        notifier: Optional[ToastNotifier] = None,
        sounds_dir: Optional[str] = None,
        tick_interval: Optional[float] = None,
        debounce_seconds: Optional[float] = None,
    ):
        self.gateway = gateway
        self.access_token = access_token
        self.notifier = notifier or ToastNotifier()
        self.tick_interval = tick_interval if tick_interval is not None else app_settings.TICK_INTERVAL_SECONDS
        self.probe_result: Optional[ProbeResult] = None
        self.energy_level = EnergyLevel.MEDIUM

        sounds = Path(sounds_dir or app_settings.SOUNDS_DIR)
        self._channel = channel or SilentChannel()
        self._catalog = TrackCatalog(sounds)
        self._debounce = debounce_seconds if debounce_seconds is not None else app_settings.AUDIO_DEBOUNCE_SECONDS

        self.machine = SessionStateMachine(on_complete=self._on_complete)
        self.signal = CompletionSignal(chime or SilentChime(), sounds / "bell.mp3", self.notifier)
        self.streak: Optional[StreakTracker] = None
        self.audio: Optional[AmbientAudioCoordinator] = None

        self._ticker: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._initialized = False

    # ----- lifecycle -----
    async def initialize(self) -> "FocusCoordinator":
        if self._initialized:
            return self

        if self.gateway is None:
            self.gateway, self.probe_result = await select_gateway(self.access_token, self.notifier)

        self.streak = StreakTracker(self.gateway, self.notifier)
        self.audio = AmbientAudioCoordinator(
            self._channel,
            self._catalog,
            self.gateway,
            notifier=self.notifier,
            debounce_seconds=self._debounce,
        )

        loaded = SessionSettings()
        try:
            loaded = await self.gateway.get_settings()
        except FocusError as exc:
            logger.error("Loading settings failed: %s", exc)
            self.notifier.error("Error loading data", "Could not load your settings. Using defaults.")

        try:
            audio_pref = await self.gateway.get_audio_preference()
        except FocusError as exc:
            logger.warning("Loading audio preference failed: %s", exc)
        else:
            self.audio.restore(audio_pref, loaded.sound_enabled)

        self.machine.apply_settings(loaded)
        self.machine.reset()
        await self.streak.load()

        self._initialized = True
        logger.info("Coordinator ready (%s mode)", "demo" if self.is_demo_mode else "live")
        return self

    async def close(self) -> None:
        self._cancel_ticker()
        if self._ticker is not None:
            await asyncio.gather(self._ticker, return_exceptions=True)
            self._ticker = None
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self.audio is not None:
            await self.audio.close()

    # ----- observed state -----
    @property
    def is_demo_mode(self) -> bool:
        return bool(self.gateway is not None and self.gateway.is_demo)

    @property
    def settings(self) -> SessionSettings:
        return self.machine.settings

    @property
    def current_streak(self) -> int:
        return self.streak.current_streak if self.streak else 0

    def snapshot(self) -> CoordinatorState:
        snap = self.machine.snapshot()
        audio = self.audio
        return CoordinatorState(
            mode=snap.mode,
            seconds_remaining=snap.seconds_remaining,
            is_running=snap.is_running,
            sessions_completed_in_cycle=snap.sessions_completed_in_cycle,
            streak=self.current_streak,
            is_demo_mode=self.is_demo_mode,
            energy_level=self.energy_level,
            settings=self.settings.model_copy(),
            audio=AudioState(
                state=audio.state if audio else "idle",
                track_id=audio.playing_track_id if audio else None,
                volume=audio.preference.volume if audio else 0.5,
                looping=audio.preference.looping if audio else True,
                custom_tracks=[a.id for a in self._catalog.custom_assets],
            ),
        )

    # ----- timer controls -----
    def start(self) -> None:
        if self.machine.start():
            self._start_ticker()

    def pause(self) -> None:
        self.machine.pause()
        self._cancel_ticker()

    def reset(self) -> None:
        self.machine.reset()
        self._cancel_ticker()

    def set_mode(self, mode: TimerMode) -> None:
        self.machine.set_mode(mode)
        self._cancel_ticker()

    def tick(self) -> Optional[TimerMode]:
        return self.machine.tick()

    def set_energy_level(self, level: EnergyLevel) -> None:
        self.energy_level = EnergyLevel(level)

    # ----- settings -----
    def update_setting(self, key: str, value: Any) -> SessionSettings:
        return self.update_settings({key: value})

    def update_settings(self, changes: Dict[str, Any]) -> SessionSettings:
        """
        Apply setting changes locally right away and persist in the background.
        A change to the current mode's duration re-syncs the countdown.
        """
        unknown = [k for k in changes if k not in SessionSettings.model_fields]
        if unknown:
            raise InvalidSettingError(f"Unknown setting(s): {', '.join(unknown)}")

        updated = self.settings.model_copy()
        try:
            for key, value in changes.items():
                setattr(updated, key, value)
        except ValidationError as exc:
            raise InvalidSettingError(str(exc)) from exc

        for key in changes:
            self.machine.apply_settings(updated, key)

        payload = {k: getattr(updated, k) for k in changes}
        self._spawn(self._save_settings(payload))
        return updated

    async def _save_settings(self, changes: Dict[str, Any]) -> None:
        try:
            await self.gateway.update_settings(changes)
        except FocusError as exc:
            logger.error("Saving settings failed: %s", exc)
            self.notifier.error("Error saving settings", "Your settings could not be saved.")

    # ----- ambient audio -----
    def select_ambient_track(self, track_id: str) -> Optional[str]:
        try:
            return self.audio.select_track(track_id)
        except PlaybackError as exc:
            self.notifier.error("Sound file error", str(exc))
            raise

    def set_volume(self, volume: float) -> float:
        return self.audio.set_volume(volume)

    def set_looping(self, looping: bool) -> bool:
        return self.audio.set_looping(looping)

    def register_upload(self, filename: str, content_type: Optional[str], data: bytes) -> CustomAudioAsset:
        try:
            return self.audio.register_upload(filename, content_type, data)
        except InvalidUploadError:
            self.notifier.error("Invalid file type", "Please upload an audio file.")
            raise
        except PlaybackError as exc:
            self.notifier.error("Error playing sound", str(exc))
            raise

    # ----- history -----
    async def recent_sessions(self, limit: int = 10) -> List[SessionRead]:
        try:
            return await self.gateway.get_recent_sessions(limit)
        except FocusError as exc:
            logger.error("Loading sessions failed: %s", exc)
            self.notifier.error("Error loading sessions", "Your recent sessions could not be loaded.")
            return []

    # ----- internals -----
    def _on_complete(self, mode: TimerMode) -> None:
        duration = self.settings.seconds_for(mode)
        self.signal.fire(mode, self.settings.sound_enabled)
        if self.streak is not None:
            self._spawn(self.streak.on_complete(mode, duration, self.energy_level))

    def _start_ticker(self) -> None:
        self._cancel_ticker()
        self._ticker = asyncio.get_running_loop().create_task(self._run_ticker())

    def _cancel_ticker(self) -> None:
        task = self._ticker
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run_ticker(self) -> None:
        while self.machine.is_running:
            await asyncio.sleep(self.tick_interval)
            self.tick()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

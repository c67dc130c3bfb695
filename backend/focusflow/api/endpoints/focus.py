# backend/focusflow/api/endpoints/focus.py
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from focusflow.api.deps import get_coordinator
from focusflow.coordinator import FocusCoordinator
from focusflow.core.errors import InvalidSettingError, InvalidUploadError, PlaybackError
from focusflow.schemas.focus import (
    CoordinatorState,
    EnergyRequest,
    LoopingRequest,
    ModeRequest,
    ToastRead,
    TrackRequest,
    UploadedTrackRead,
    VolumeRequest,
)
from focusflow.schemas.session import SessionRead
from focusflow.schemas.settings import SettingsUpdate

router = APIRouter(prefix="/focus", tags=["Focus"])


# --------------------------------------------------------------------------
# Timer
# --------------------------------------------------------------------------
@router.get("/state", response_model=CoordinatorState)
async def read_state(coordinator: FocusCoordinator = Depends(get_coordinator)):
    return coordinator.snapshot()


@router.post("/start", response_model=CoordinatorState)
async def start_timer(coordinator: FocusCoordinator = Depends(get_coordinator)):
    coordinator.start()
    return coordinator.snapshot()


@router.post("/pause", response_model=CoordinatorState)
async def pause_timer(coordinator: FocusCoordinator = Depends(get_coordinator)):
    coordinator.pause()
    return coordinator.snapshot()


@router.post("/reset", response_model=CoordinatorState)
async def reset_timer(coordinator: FocusCoordinator = Depends(get_coordinator)):
    coordinator.reset()
    return coordinator.snapshot()


@router.post("/mode", response_model=CoordinatorState)
async def change_mode(payload: ModeRequest, coordinator: FocusCoordinator = Depends(get_coordinator)):
    coordinator.set_mode(payload.mode)
    return coordinator.snapshot()


@router.post("/energy", response_model=CoordinatorState)
async def change_energy_level(payload: EnergyRequest, coordinator: FocusCoordinator = Depends(get_coordinator)):
    coordinator.set_energy_level(payload.level)
    return coordinator.snapshot()


# --------------------------------------------------------------------------
# Settings
# --------------------------------------------------------------------------
@router.patch("/settings", response_model=CoordinatorState)
async def update_settings(payload: SettingsUpdate, coordinator: FocusCoordinator = Depends(get_coordinator)):
    changes = payload.changes()
    if not changes:
        return coordinator.snapshot()
    try:
        coordinator.update_settings(changes)
    except InvalidSettingError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return coordinator.snapshot()


# --------------------------------------------------------------------------
# Ambient audio
# --------------------------------------------------------------------------
@router.post("/audio/track", response_model=CoordinatorState)
async def select_track(payload: TrackRequest, coordinator: FocusCoordinator = Depends(get_coordinator)):
    try:
        coordinator.select_ambient_track(payload.track_id)
    except PlaybackError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return coordinator.snapshot()


@router.post("/audio/volume", response_model=CoordinatorState)
async def change_volume(payload: VolumeRequest, coordinator: FocusCoordinator = Depends(get_coordinator)):
    try:
        coordinator.set_volume(payload.volume)
    except InvalidSettingError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return coordinator.snapshot()


@router.post("/audio/looping", response_model=CoordinatorState)
async def change_looping(payload: LoopingRequest, coordinator: FocusCoordinator = Depends(get_coordinator)):
    coordinator.set_looping(payload.looping)
    return coordinator.snapshot()


@router.post("/audio/upload", response_model=UploadedTrackRead, status_code=status.HTTP_201_CREATED)
async def upload_track(
    file: UploadFile = File(...),
    coordinator: FocusCoordinator = Depends(get_coordinator),
):
    data = await file.read()
    try:
        asset = coordinator.register_upload(file.filename, file.content_type, data)
    except InvalidUploadError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except PlaybackError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return UploadedTrackRead(id=asset.id, display_name=asset.display_name, content_type=asset.content_type)


# --------------------------------------------------------------------------
# History / notifications
# --------------------------------------------------------------------------
@router.get("/sessions", response_model=List[SessionRead])
async def read_sessions(limit: int = 10, coordinator: FocusCoordinator = Depends(get_coordinator)):
    return await coordinator.recent_sessions(max(1, min(limit, 100)))


@router.get("/notifications", response_model=List[ToastRead])
async def read_notifications(limit: int = 10, coordinator: FocusCoordinator = Depends(get_coordinator)):
    return [
        ToastRead(title=t.title, description=t.description, variant=t.variant, created_at=t.created_at)
        for t in coordinator.notifier.recent(max(1, min(limit, 50)))
    ]

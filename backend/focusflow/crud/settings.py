# backend/focusflow/crud/settings.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from focusflow.core.errors import InvalidSettingError
from focusflow.db.mongo import get_db
from focusflow.models.audio import AudioPreference
from focusflow.models.settings import SessionSettings

# Audio preference fields live on the settings document under these names.
AUDIO_FIELDS = {
    "selected_track_id": "last_ambient_sound",
    "volume": "audio_volume",
    "looping": "audio_looping",
}

logger = logging.getLogger(__name__)


def get_settings_collection():
    """
    'focus_settings' collection from the Motor handle.
    """
    return get_db()["focus_settings"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _valid_fields(model: Type[BaseModel], data: Dict[str, Any], user_id: Any) -> Dict[str, Any]:
    """
    Keep only the stored values the model accepts; a bad field falls back to
    its default.
    """
    valid = {}
    for key, value in data.items():
        try:
            model.model_validate({key: value})
        except ValidationError:
            logger.warning("Ignoring invalid stored %s=%r for user %s", key, value, user_id)
            continue
        valid[key] = value
    return valid


def serialize_settings(doc: Optional[Dict[str, Any]]) -> SessionSettings:
    """
    Mongo document -> SessionSettings. Missing document or fields fall back to
    the defaults (first run).
    """
    if not doc:
        return SessionSettings()
    known = {k: doc[k] for k in SessionSettings.model_fields if doc.get(k) is not None}
    return SessionSettings(**_valid_fields(SessionSettings, known, doc.get("user_id")))


def serialize_audio(doc: Optional[Dict[str, Any]]) -> AudioPreference:
    if not doc:
        return AudioPreference()
    data = {f: doc[db] for f, db in AUDIO_FIELDS.items() if doc.get(db) is not None}
    return AudioPreference(**_valid_fields(AudioPreference, data, doc.get("user_id")))


async def _get_doc(user_id: str) -> Optional[Dict[str, Any]]:
    return await get_settings_collection().find_one({"user_id": user_id})


async def _upsert(user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update the user's settings document, creating it on first write.
    """
    col = get_settings_collection()
    now = _utcnow()

    await col.update_one(
        {"user_id": user_id},
        {
            "$set": {**fields, "updated_at": now},
            "$setOnInsert": {"user_id": user_id, "created_at": now},
        },
        upsert=True,
    )
    return await _get_doc(user_id)


# ---------- READ ----------

async def get_settings(user_id: str) -> SessionSettings:
    return serialize_settings(await _get_doc(user_id))


async def get_audio_preference(user_id: str) -> AudioPreference:
    return serialize_audio(await _get_doc(user_id))


# ---------- UPDATE ----------

async def update_settings(user_id: str, changes: Dict[str, Any]) -> SessionSettings:
    # validate the merged result before anything hits the store
    merged = await get_settings(user_id)
    try:
        for key, value in changes.items():
            setattr(merged, key, value)
    except ValidationError as exc:
        raise InvalidSettingError(str(exc)) from exc

    payload = {k: getattr(merged, k) for k in changes}
    if "preferred_theme" in payload:
        payload["preferred_theme"] = merged.preferred_theme.value

    if not payload:
        return merged

    doc = await _upsert(user_id, payload)
    return serialize_settings(doc)


async def update_audio_preference(user_id: str, preference: AudioPreference) -> AudioPreference:
    payload = {db_name: getattr(preference, field_name) for field_name, db_name in AUDIO_FIELDS.items()}
    doc = await _upsert(user_id, payload)
    return serialize_audio(doc)

# backend/focusflow/crud/sessions.py

from datetime import datetime, timezone
from typing import List

from focusflow.crud import streaks as streak_crud
from focusflow.db.mongo import get_db
from focusflow.models.session import TimerMode
from focusflow.schemas.session import SessionCreate, SessionRead


def get_sessions_collection():
    """
    'focus_sessions' collection from the Motor handle.
    """
    return get_db()["focus_sessions"]


def serialize_session(session) -> SessionRead:
    """
    Mongo document(dict) -> SessionRead
    """
    return SessionRead(
        id=str(session["_id"]),
        user_id=session["user_id"],
        duration=session["duration"],
        mode=session["mode"],
        completed=session.get("completed", True),
        energy_level=session.get("energy_level"),
        created_at=session["created_at"],
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# CREATE
async def record_session(user_id: str, data: SessionCreate) -> SessionRead:
    """
    Store a completed interval. A completed focus interval also advances the
    user's streak, so callers re-read the streak afterwards.
    """
    col = get_sessions_collection()

    doc = {
        "user_id": user_id,
        "duration": data.duration,
        "mode": data.mode.value,
        "completed": data.completed,
        "energy_level": data.energy_level.value if data.energy_level else None,
        "created_at": _utcnow(),
    }

    result = await col.insert_one(doc)
    doc["_id"] = result.inserted_id

    if data.mode == TimerMode.FOCUS and data.completed:
        await streak_crud.advance_streak(user_id)

    return serialize_session(doc)


# READ ALL (latest first)
async def get_sessions(user_id: str, limit: int = 10) -> List[SessionRead]:
    col = get_sessions_collection()

    cursor = col.find({"user_id": user_id}).sort("created_at", -1).limit(limit)
    sessions = await cursor.to_list(length=limit)
    return [serialize_session(s) for s in sessions]

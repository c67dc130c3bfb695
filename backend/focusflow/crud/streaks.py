# backend/focusflow/crud/streaks.py

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from focusflow.db.mongo import get_db
from focusflow.models.streak import StreakRecord


def get_streaks_collection():
    """
    'focus_streaks' collection from the Motor handle.
    """
    return get_db()["focus_streaks"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_date(v) -> Optional[date]:
    """
    last_focus_date is stored as 'YYYY-MM-DD'. Older documents may hold a
    datetime instead.
    """
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    return date.fromisoformat(str(v)[:10])


def serialize_streak(doc: Optional[Dict[str, Any]]) -> StreakRecord:
    if not doc:
        return StreakRecord()
    return StreakRecord(
        current_streak=doc.get("current_streak", 0),
        longest_streak=doc.get("longest_streak", 0),
        last_focus_date=_parse_date(doc.get("last_focus_date")),
    )


def next_streak(existing: Optional[StreakRecord], today: date) -> StreakRecord:
    """
    Day-based streak rule applied when a focus interval completes:
    - first completion ever -> 1
    - already counted today -> unchanged
    - last focus was yesterday -> +1 (longest follows)
    - any gap -> back to 1
    """
    if existing is None:
        return StreakRecord(current_streak=1, longest_streak=1, last_focus_date=today)

    current = existing.current_streak
    longest = existing.longest_streak

    if existing.last_focus_date != today:
        if existing.last_focus_date == today - timedelta(days=1):
            current += 1
        else:
            current = 1
    longest = max(longest, current)

    return StreakRecord(current_streak=current, longest_streak=longest, last_focus_date=today)


# ---------- READ ----------

async def get_streak(user_id: str) -> StreakRecord:
    doc = await get_streaks_collection().find_one({"user_id": user_id})
    return serialize_streak(doc)


# ---------- UPDATE ----------

async def advance_streak(user_id: str, today: Optional[date] = None) -> StreakRecord:
    col = get_streaks_collection()
    today = today or _utcnow().date()

    doc = await col.find_one({"user_id": user_id})
    updated = next_streak(serialize_streak(doc) if doc else None, today)

    fields = {
        "current_streak": updated.current_streak,
        "longest_streak": updated.longest_streak,
        "last_focus_date": today.isoformat(),
        "updated_at": _utcnow(),
    }
    if doc:
        await col.update_one({"user_id": user_id}, {"$set": fields})
    else:
        await col.insert_one({"user_id": user_id, **fields})

    return updated

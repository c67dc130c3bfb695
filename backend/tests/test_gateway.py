from datetime import date, timedelta

import pytest

from focusflow.core.errors import InvalidSettingError, StoreConnectionError
from focusflow.crud.streaks import advance_streak, next_streak
from focusflow.gateway.demo import DemoGateway
from focusflow.gateway.live import LiveGateway
from focusflow.models.audio import AudioPreference
from focusflow.models.session import EnergyLevel, TimerMode
from focusflow.models.settings import ThemeEnum
from focusflow.models.streak import StreakRecord


# ---------- demo ----------

async def test_demo_gateway_returns_defaults():
    gw = DemoGateway()
    s = await gw.get_settings()
    assert (s.focus_minutes, s.short_break_minutes, s.long_break_minutes, s.sessions_until_long_break) == (25, 5, 15, 4)
    assert (await gw.get_streak()).current_streak == 0
    assert await gw.record_session(1500, TimerMode.FOCUS) is None
    assert await gw.get_recent_sessions() == []


async def test_demo_updates_do_not_survive_a_new_instance():
    gw = DemoGateway()
    updated = await gw.update_settings({"focus_minutes": 30})
    assert updated.focus_minutes == 30
    assert (await gw.get_settings()).focus_minutes == 30

    assert (await DemoGateway().get_settings()).focus_minutes == 25


# ---------- live ----------

async def test_live_settings_default_when_no_document(fake_db):
    gw = LiveGateway("user-1")
    s = await gw.get_settings()
    assert s.focus_minutes == 25
    assert s.preferred_theme == ThemeEnum.LIGHT


async def test_live_update_settings_upserts_and_merges(fake_db):
    gw = LiveGateway("user-1")
    await gw.update_settings({"focus_minutes": 40, "preferred_theme": ThemeEnum.SPACE})
    await gw.update_settings({"long_break_minutes": 20})

    s = await gw.get_settings()
    assert (s.focus_minutes, s.long_break_minutes) == (40, 20)
    assert s.preferred_theme == ThemeEnum.SPACE
    assert len(fake_db["focus_settings"].docs) == 1
    assert fake_db["focus_settings"].docs[0]["preferred_theme"] == "space"


async def test_live_update_settings_rejects_out_of_range(fake_db):
    gw = LiveGateway("user-1")
    with pytest.raises(InvalidSettingError):
        await gw.update_settings({"focus_minutes": 0})
    assert fake_db["focus_settings"].docs == []


async def test_live_audio_preference_shares_settings_document(fake_db):
    gw = LiveGateway("user-1")
    await gw.update_settings({"focus_minutes": 45})
    await gw.update_audio_preference(AudioPreference(selected_track_id="rain", volume=0.2, looping=False))

    pref = await gw.get_audio_preference()
    assert pref == AudioPreference(selected_track_id="rain", volume=0.2, looping=False)
    assert (await gw.get_settings()).focus_minutes == 45
    doc = fake_db["focus_settings"].docs[0]
    assert doc["last_ambient_sound"] == "rain"
    assert doc["audio_volume"] == 0.2


async def test_live_record_focus_session_advances_streak(fake_db):
    gw = LiveGateway("user-1")
    created = await gw.record_session(1500, TimerMode.FOCUS, EnergyLevel.HIGH)

    assert created.mode == TimerMode.FOCUS
    assert created.energy_level == EnergyLevel.HIGH
    assert (await gw.get_streak()).current_streak == 1

    recent = await gw.get_recent_sessions()
    assert [r.id for r in recent] == [created.id]


async def test_live_break_session_does_not_touch_streak(fake_db):
    gw = LiveGateway("user-1")
    await gw.record_session(300, TimerMode.SHORT_BREAK)
    assert (await gw.get_streak()).current_streak == 0
    assert len(fake_db["focus_sessions"].docs) == 1


async def test_live_errors_become_store_connection_errors(fake_db):
    gw = LiveGateway("user-1")
    fake_db.down = True
    with pytest.raises(StoreConnectionError):
        await gw.get_settings()
    with pytest.raises(StoreConnectionError):
        await gw.record_session(1500, TimerMode.FOCUS)


async def test_live_without_connection_raises_store_connection_error(no_db):
    with pytest.raises(StoreConnectionError):
        await LiveGateway("user-1").get_streak()


# ---------- streak rule ----------

def test_next_streak_rules():
    today = date(2026, 3, 10)
    assert next_streak(None, today) == StreakRecord(current_streak=1, longest_streak=1, last_focus_date=today)

    same_day = StreakRecord(current_streak=3, longest_streak=5, last_focus_date=today)
    assert next_streak(same_day, today).current_streak == 3

    yesterday = StreakRecord(current_streak=5, longest_streak=5, last_focus_date=today - timedelta(days=1))
    bumped = next_streak(yesterday, today)
    assert (bumped.current_streak, bumped.longest_streak) == (6, 6)

    gap = StreakRecord(current_streak=4, longest_streak=9, last_focus_date=today - timedelta(days=3))
    broken = next_streak(gap, today)
    assert (broken.current_streak, broken.longest_streak) == (1, 9)


async def test_advance_streak_across_days(fake_db):
    day1 = date(2026, 3, 1)
    await advance_streak("u", today=day1)
    await advance_streak("u", today=day1)
    second = await advance_streak("u", today=day1 + timedelta(days=1))
    assert second.current_streak == 2

    doc = fake_db["focus_streaks"].docs[0]
    assert doc["last_focus_date"] == "2026-03-02"
    assert len(fake_db["focus_streaks"].docs) == 1


async def test_live_invalid_stored_fields_fall_back_to_defaults(fake_db):
    fake_db["focus_settings"].docs.append(
        {"user_id": "user-1", "focus_minutes": 90, "long_break_minutes": 20, "audio_volume": 1.5, "last_ambient_sound": "rain"}
    )
    gw = LiveGateway("user-1")

    s = await gw.get_settings()
    assert (s.focus_minutes, s.long_break_minutes) == (25, 20)

    pref = await gw.get_audio_preference()
    assert (pref.selected_track_id, pref.volume) == ("rain", 0.5)

    # a later write of the bad key repairs it
    await gw.update_settings({"focus_minutes": 45})
    assert fake_db["focus_settings"].docs[0]["focus_minutes"] == 45


async def test_live_unreadable_streak_document_is_a_store_error(fake_db):
    fake_db["focus_streaks"].docs.append({"user_id": "user-1", "current_streak": -4})
    with pytest.raises(StoreConnectionError):
        await LiveGateway("user-1").get_streak()

from datetime import timedelta

from focusflow.core.notifier import ToastNotifier
from focusflow.core.security import create_access_token
from focusflow.db import mongo
from focusflow.gateway import probe
from focusflow.gateway.demo import DemoGateway
from focusflow.gateway.live import LiveGateway


async def test_missing_token_falls_back_to_demo(fake_db):
    notifier = ToastNotifier()
    gateway, result = await probe.select_gateway(None, notifier)

    assert isinstance(gateway, DemoGateway)
    assert result.live is False
    assert result.auth_error is True
    assert result.connection_error is False
    assert notifier.toasts[-1].title == "Authentication Required"


async def test_expired_token_falls_back_to_demo(fake_db):
    token = create_access_token("user-1", expires_delta=timedelta(minutes=-5))
    gateway, result = await probe.select_gateway(token)
    assert gateway.is_demo
    assert result.user_id is None


async def test_token_signed_with_other_secret_is_rejected(fake_db):
    token = create_access_token("user-1", secret_key="someone-else")
    gateway, _ = await probe.select_gateway(token)
    assert gateway.is_demo


async def test_unreachable_store_falls_back_to_demo(fake_db):
    fake_db.down = True
    notifier = ToastNotifier()
    gateway, result = await probe.select_gateway(create_access_token("user-1"), notifier)
    assert gateway.is_demo
    assert result.user_id == "user-1"
    assert (result.connection_error, result.auth_error) == (True, False)
    assert notifier.toasts[-1].title == "Database Connection Error"


async def test_no_mongo_uri_falls_back_to_demo(no_db, monkeypatch):
    monkeypatch.setattr(mongo.settings, "MONGO_URI", None)
    gateway, result = await probe.select_gateway(create_access_token("user-1"))
    assert gateway.is_demo
    assert "MONGO_URI" in result.reason


async def test_missing_collections_falls_back_to_demo(fake_db):
    del fake_db._collections["focus_streaks"]
    notifier = ToastNotifier()
    gateway, result = await probe.select_gateway(create_access_token("user-1"), notifier)

    assert gateway.is_demo
    assert result.missing_collections == ("focus_streaks",)
    assert notifier.toasts[-1].title == "Database Setup Required"
    assert "focus_streaks" in notifier.toasts[-1].description


async def test_crashing_probe_still_yields_demo(fake_db, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(probe, "probe_capabilities", boom)
    gateway, result = await probe.select_gateway(create_access_token("user-1"))
    assert gateway.is_demo
    assert result.reason == "unexpected"


async def test_healthy_store_selects_live_gateway(fake_db):
    notifier = ToastNotifier()
    gateway, result = await probe.select_gateway(create_access_token("user-1"), notifier)

    assert isinstance(gateway, LiveGateway)
    assert gateway.user_id == "user-1"
    assert result.live is True
    assert fake_db.commands == ["ping"]
    assert notifier.toasts == []

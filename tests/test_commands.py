"""
CommandRouter tests: owner and user namespaces
"""
from datetime import timedelta

import pytest

from coachbot.bot import texts
from coachbot.bot.commands import AdminCommand, UserCommand, parse_command
from coachbot.config import Settings
from coachbot.db.models import UserStatus
from conftest import ADMIN, START


def test_parse_command():
    assert parse_command("/ADD 628111 30") == ("add", ["628111", "30"])
    assert parse_command("  /status@coach_bot  ") == ("status", [])
    assert AdminCommand("nope") is AdminCommand.UNKNOWN
    assert UserCommand("status") is UserCommand.STATUS


@pytest.mark.asyncio
async def test_add_then_cek_scenario(commands, store, clock):
    reply = await commands.handle(ADMIN, "/add 628111 30 50")
    assert reply == texts.user_added("628111", 30, 50)

    u = store.find("628111")
    assert u.status == UserStatus.PAID
    assert u.expire_at == START + timedelta(days=30)
    assert u.quota == 50
    assert u.usage_count == 0

    clock.now = START + timedelta(seconds=5)
    report = await commands.handle(ADMIN, "/cek 628111")
    assert "Status: Aktif (30 hari tersisa)" in report
    assert "Kuota: 50" in report
    assert "Digunakan: 0x" in report


@pytest.mark.asyncio
async def test_add_persists(commands, users_file):
    await commands.handle(ADMIN, "/add 628111")
    assert "628111" in users_file.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_add_defaults_and_usage(commands, store):
    assert await commands.handle(ADMIN, "/add") == texts.ADD_USAGE
    assert await commands.handle(ADMIN, "/add 628111 30 lots") == texts.ADD_USAGE
    assert store.find("628111") is None

    reply = await commands.handle(ADMIN, "/add 628111 abc")
    assert "Masa aktif: 30 hari." in reply
    assert "Quota: Unlimited" in reply
    assert store.find("628111").quota is None


@pytest.mark.asyncio
async def test_add_with_out_of_range_days_is_rejected(gate, inbox, store, users_file):
    await gate.handle(inbox.message(ADMIN, "/add 628111 3000000"))

    assert inbox.replies == [texts.ADD_USAGE]
    assert store.find("628111") is None
    assert not users_file.exists()


@pytest.mark.asyncio
async def test_regrant_clears_notification_flag(commands, store, clock):
    await commands.handle(ADMIN, "/add 628111 5 10")
    u = store.find("628111")
    u.expiry_notified = True
    u.notified_threshold = 3

    clock.now = START + timedelta(days=2)
    await commands.handle(ADMIN, "/add 628111 30")

    assert u.expiry_notified is False
    assert u.notified_threshold is None
    assert u.expire_at == clock.now + timedelta(days=30)
    assert u.quota == 10
    assert len(store) == 1


@pytest.mark.asyncio
async def test_identity_suffix_is_applied(store, notifier, clock):
    from coachbot.bot.commands import CommandRouter

    settings = Settings(admin_id="628999", identity_suffix="@c.us")
    router = CommandRouter(store, notifier, settings, clock)

    await router.handle("628999@c.us", "/add 628111 7")
    assert store.find("628111@c.us") is not None
    assert "628111@c.us" in await router.handle("628999@c.us", "/cek 628111@c.us")


@pytest.mark.asyncio
async def test_cek_unknown_and_usage(commands):
    assert await commands.handle(ADMIN, "/cek") == texts.CEK_USAGE
    assert await commands.handle(ADMIN, "/cek 628000") == texts.USER_NOT_FOUND


@pytest.mark.asyncio
async def test_cek_resolves_expiry(commands, store, clock, transport):
    await commands.handle(ADMIN, "/add 628111 1")
    clock.now = START + timedelta(days=2)

    report = await commands.handle(ADMIN, "/cek 628111")

    assert "Status: expired" in report
    assert store.find("628111").status == UserStatus.EXPIRED
    assert transport.sent == [("628111", texts.REVOKED_NOTICE)]


@pytest.mark.asyncio
async def test_list_counts_with_lazy_expiry(commands, store, clock):
    await commands.handle(ADMIN, "/add 628111 30")
    await commands.handle(ADMIN, "/add 628222 1")
    await commands.handle(ADMIN, "/add 628333 10")
    store.upsert("628444", START)
    clock.now = START + timedelta(days=5)

    assert await commands.handle(ADMIN, "/list") == texts.user_list(2, 1)
    assert store.find("628222").status == UserStatus.EXPIRED


@pytest.mark.asyncio
async def test_admin_help_and_unknown(commands):
    assert await commands.handle(ADMIN, "/help") == texts.ADMIN_HELP
    assert await commands.handle(ADMIN, "/status") == texts.UNKNOWN_COMMAND


@pytest.mark.asyncio
async def test_user_commands(commands, store, clock):
    assert await commands.handle("628111", "/start") == texts.USER_HELP
    assert await commands.handle("628111", "/help") == texts.USER_HELP
    assert await commands.handle("628111", "/status") == texts.USER_NOT_REGISTERED
    assert await commands.handle("628111", "/add 628111 365") == texts.UNKNOWN_COMMAND
    assert store.find("628111") is None

    await commands.handle(ADMIN, "/add 628111 10 20")
    store.find("628111").usage_count = 4
    assert await commands.handle("628111", "/status") == texts.account_status(10, 20, 4)

    clock.now = START + timedelta(days=11)
    assert await commands.handle("628111", "/status") == texts.USER_INACTIVE

# slash-commands: owner namespace and user namespace

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional, Tuple

from coachbot.bot import texts
from coachbot.config import Settings
from coachbot.db.models import UserRecord, UserStatus
from coachbot.db.store import UserStore
from coachbot.services import subscription
from coachbot.services.notifier import Notifier

logger = logging.getLogger(__name__)

COMMAND_MARKER = "/"


class AdminCommand(str, Enum):
    ADD = "add"
    CEK = "cek"
    LIST = "list"
    HELP = "help"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class UserCommand(str, Enum):
    START = "start"
    HELP = "help"
    STATUS = "status"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


def is_command(body: str) -> bool:
    return body.strip().startswith(COMMAND_MARKER)


def parse_command(body: str) -> Tuple[str, List[str]]:
    parts = body.strip().split()
    name = parts[0][len(COMMAND_MARKER):].lower()
    # "/status@my_bot" in group chats
    name = name.split("@", 1)[0]
    return name, parts[1:]


def _parse_int(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


class CommandRouter:
    def __init__(
        self,
        store: UserStore,
        notifier: Notifier,
        settings: Settings,
        clock: Callable[[], datetime],
    ):
        self.store = store
        self.notifier = notifier
        self.settings = settings
        self.clock = clock

    def is_admin(self, identity: str) -> bool:
        admin = self.settings.admin_identity
        return bool(admin) and identity == admin

    async def handle(self, sender: str, body: str) -> str:
        name, args = parse_command(body)
        if self.is_admin(sender):
            return await self.handle_admin(AdminCommand(name), args)
        return await self.handle_user(sender, UserCommand(name))

    async def _resolve(self, u: UserRecord, now: datetime) -> None:
        if subscription.resolve_expiry(u, now):
            await self.store.save()
            await self.notifier.access_revoked(u)

    # -------------------- owner --------------------

    async def handle_admin(self, cmd: AdminCommand, args: List[str]) -> str:
        if cmd == AdminCommand.ADD:
            return await self._add(args)
        if cmd == AdminCommand.CEK:
            return await self._cek(args)
        if cmd == AdminCommand.LIST:
            return await self._list()
        if cmd == AdminCommand.HELP:
            return texts.ADMIN_HELP
        return texts.UNKNOWN_COMMAND

    async def _add(self, args: List[str]) -> str:
        if len(args) < 1 or len(args) > 3:
            return texts.ADD_USAGE

        identity = self.settings.normalize_identity(args[0])
        days = _parse_int(args[1]) if len(args) > 1 else None
        if not days or days <= 0:
            days = self.settings.default_grant_days

        quota = None
        if len(args) > 2:
            quota = _parse_int(args[2])
            if quota is None:
                return texts.ADD_USAGE

        now = self.clock()
        try:
            now + timedelta(days=days)
        except OverflowError:
            return texts.ADD_USAGE

        u = self.store.upsert(identity, now)
        subscription.grant(u, days, quota, now)
        await self.store.save()
        logger.info("Granted %s: %d days, quota=%s", identity, days, u.quota)
        return texts.user_added(identity, days, u.quota)

    async def _cek(self, args: List[str]) -> str:
        if len(args) != 1:
            return texts.CEK_USAGE

        identity = self.settings.normalize_identity(args[0])
        u = self.store.find(identity)
        if u is None:
            return texts.USER_NOT_FOUND

        now = self.clock()
        await self._resolve(u, now)
        if u.status == UserStatus.PAID:
            status = f"Aktif ({subscription.remaining_days(u, now)} hari tersisa)"
        else:
            status = u.status.value
        return texts.user_report(identity, status, u.quota, u.usage_count)

    async def _list(self) -> str:
        now = self.clock()
        active = expired = 0
        for u in self.store.users():
            await self._resolve(u, now)
            if u.status == UserStatus.PAID:
                active += 1
            elif u.status == UserStatus.EXPIRED:
                expired += 1
        return texts.user_list(active, expired)

    # -------------------- user --------------------

    async def handle_user(self, sender: str, cmd: UserCommand) -> str:
        if cmd in (UserCommand.START, UserCommand.HELP):
            return texts.USER_HELP
        if cmd == UserCommand.STATUS:
            return await self._status(sender)
        return texts.UNKNOWN_COMMAND

    async def _status(self, sender: str) -> str:
        u = self.store.find(sender)
        if u is None:
            return texts.USER_NOT_REGISTERED

        now = self.clock()
        await self._resolve(u, now)
        if u.status != UserStatus.PAID:
            return texts.USER_INACTIVE
        return texts.account_status(subscription.remaining_days(u, now), u.quota, u.usage_count)

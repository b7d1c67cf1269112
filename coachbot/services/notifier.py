from __future__ import annotations

import logging

from coachbot.bot import texts
from coachbot.bot.transport import Transport
from coachbot.db.models import UserRecord

logger = logging.getLogger(__name__)


class Notifier:
    """Pushes subscription notices to users. Send failures are logged, not raised."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def _send(self, identity: str, text: str) -> bool:
        try:
            await self.transport.send_message(identity, text)
        except Exception as e:
            logger.warning("Failed to send notice to %s: %r", identity, e)
            return False
        return True

    async def access_revoked(self, u: UserRecord) -> bool:
        return await self._send(u.identity, texts.REVOKED_NOTICE)

    async def expiry_reminder(self, u: UserRecord, days: int) -> bool:
        return await self._send(u.identity, texts.EXPIRY_REMINDER.format(days=days))

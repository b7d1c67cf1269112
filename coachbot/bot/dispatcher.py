from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from coachbot.bot import texts
from coachbot.bot.commands import CommandRouter, is_command
from coachbot.bot.transport import IncomingMessage, Transport
from coachbot.db.store import UserStore
from coachbot.services.limits import Admission, admit
from coachbot.services.notifier import Notifier
from coachbot.services.openai_client import OpenAIClient

logger = logging.getLogger(__name__)

_REJECTIONS = {
    Admission.EXPIRED: texts.ACCESS_EXPIRED,
    Admission.INACTIVE: texts.ACCESS_INACTIVE,
    Admission.QUOTA_EXHAUSTED: texts.QUOTA_EXHAUSTED,
}


class MessageDispatcher:
    def __init__(
        self,
        store: UserStore,
        commands: CommandRouter,
        notifier: Notifier,
        transport: Transport,
        llm: OpenAIClient,
        clock: Callable[[], datetime],
    ):
        self.store = store
        self.commands = commands
        self.notifier = notifier
        self.transport = transport
        self.llm = llm
        self.clock = clock

    async def handle(self, msg: IncomingMessage) -> None:
        if msg.from_me or msg.is_broadcast:
            return
        try:
            if is_command(msg.body):
                response = await self.commands.handle(msg.sender, msg.body)
                if response:
                    await self._reply(msg, response)
                return
            await self._handle_ai(msg)
        except Exception:
            logger.exception("Failed to handle message from %s", msg.sender)

    async def _handle_ai(self, msg: IncomingMessage) -> None:
        u = self.store.find(msg.sender)
        if u is None:
            await self._reply(msg, texts.NOT_REGISTERED)
            return

        now = self.clock()
        # counted even when the attempt is rejected below
        u.usage_count += 1
        u.last_used = now

        decision = admit(u, now)
        await self.store.save()

        if decision != Admission.ALLOWED:
            if decision == Admission.EXPIRED:
                await self.notifier.access_revoked(u)
            await self._reply(msg, _REJECTIONS[decision])
            return

        try:
            await self.transport.send_typing(msg.sender)
        except Exception as e:
            logger.warning("Typing indicator failed for %s: %r", msg.sender, e)

        answer = await asyncio.to_thread(self.llm.reply, msg.body.strip())
        await self._reply(msg, answer)

    async def _reply(self, msg: IncomingMessage, text: str) -> None:
        try:
            await msg.reply(text)
        except Exception as e:
            logger.warning("Failed to reply to %s: %r", msg.sender, e)

"""
Pytest fixtures: temp users file, fixed clock, recording transport, fake LLM.
"""
from datetime import datetime, timezone

import pytest

from coachbot.bot.commands import CommandRouter
from coachbot.bot.dispatcher import MessageDispatcher
from coachbot.bot.transport import IncomingMessage
from coachbot.config import Settings
from coachbot.db.store import UserStore
from coachbot.services.notifier import Notifier

ADMIN = "628999"
START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class RecordingTransport:
    def __init__(self, fail_for: set[str] | None = None):
        self.sent: list[tuple[str, str]] = []
        self.typing: list[str] = []
        self.fail_for = fail_for or set()

    async def send_message(self, identity: str, text: str) -> None:
        if identity in self.fail_for:
            raise ConnectionError(f"cannot reach {identity}")
        self.sent.append((identity, text))

    async def send_typing(self, identity: str) -> None:
        self.typing.append(identity)


class FakeLLM:
    def __init__(self, answer: str = "Semangat!"):
        self.answer = answer
        self.prompts: list[str] = []

    def reply(self, user_message: str) -> str:
        self.prompts.append(user_message)
        return self.answer


class Inbox:
    """Collects replies for one IncomingMessage."""

    def __init__(self):
        self.replies: list[str] = []

    async def reply(self, text: str) -> None:
        self.replies.append(text)

    def message(self, sender: str, body: str, **kw) -> IncomingMessage:
        return IncomingMessage(sender=sender, body=body, reply=self.reply, **kw)


@pytest.fixture
def settings():
    return Settings(admin_id=ADMIN, identity_suffix="", default_grant_days=30)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def users_file(tmp_path):
    return tmp_path / "users.json"


@pytest.fixture
def store(users_file):
    return UserStore(users_file)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def notifier(transport):
    return Notifier(transport)


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def commands(store, notifier, settings, clock):
    return CommandRouter(store, notifier, settings, clock)


@pytest.fixture
def gate(store, commands, notifier, transport, llm, clock):
    return MessageDispatcher(store, commands, notifier, transport, llm, clock)


@pytest.fixture
def inbox():
    return Inbox()

# what the core needs from a chat transport

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol


class Transport(Protocol):
    async def send_message(self, identity: str, text: str) -> None: ...

    async def send_typing(self, identity: str) -> None: ...


@dataclass
class IncomingMessage:
    sender: str
    body: str
    reply: Callable[[str], Awaitable[object]]
    from_me: bool = False
    is_broadcast: bool = False

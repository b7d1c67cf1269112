# aiogram glue: Telegram updates in, Telegram messages out

from aiogram import Bot, F, Router
from aiogram.enums import ChatAction, ChatType
from aiogram.types import Message

from coachbot.bot.dispatcher import MessageDispatcher
from coachbot.bot.transport import IncomingMessage

router = Router()


class TelegramTransport:
    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_message(self, identity: str, text: str) -> None:
        await self.bot.send_message(chat_id=int(identity), text=text)

    async def send_typing(self, identity: str) -> None:
        await self.bot.send_chat_action(chat_id=int(identity), action=ChatAction.TYPING)


def to_incoming(message: Message) -> IncomingMessage:
    bot = message.bot
    from_me = (
        message.from_user is not None
        and bot is not None
        and message.from_user.id == bot.id
    )
    return IncomingMessage(
        sender=str(message.chat.id),
        body=message.text or "",
        reply=message.reply,
        from_me=from_me,
        is_broadcast=message.chat.type == ChatType.CHANNEL,
    )


@router.message(F.text)
async def on_text_message(message: Message, gate: MessageDispatcher):
    await gate.handle(to_incoming(message))

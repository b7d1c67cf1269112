import asyncio
import logging
from functools import partial

from aiogram import Bot, Dispatcher
from aiogram.types import ErrorEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from coachbot.config import settings
from coachbot.db.store import UserStore
from coachbot.bot.commands import CommandRouter
from coachbot.bot.dispatcher import MessageDispatcher
from coachbot.bot.handlers import router as message_router, TelegramTransport
from coachbot.services.backup import SessionBackup
from coachbot.services.notifier import Notifier
from coachbot.services.openai_client import OpenAIClient
from coachbot.services.scheduler import ExpiryScheduler
from coachbot.utils.time import now_tz

logger = logging.getLogger("coachbot")


def _log_loop_exception(loop, context):
    exc = context.get("exception")
    logger.error("Unhandled error in background task: %s", context.get("message"), exc_info=exc)


async def main():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)

    bot = Bot(token=settings.bot_token)
    dp = Dispatcher()
    dp.include_router(message_router)

    clock = partial(now_tz, settings.tz)
    store = UserStore(settings.users_file)
    transport = TelegramTransport(bot)
    notifier = Notifier(transport)
    llm = OpenAIClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
        temperature=settings.openai_temperature,
    )
    commands = CommandRouter(store, notifier, settings, clock)
    gate = MessageDispatcher(store, commands, notifier, transport, llm, clock)

    backup = SessionBackup(
        [settings.session_file, settings.users_file],
        settings.backup_dir,
        keep=settings.backup_keep,
    )
    expiry = ExpiryScheduler(
        store,
        notifier,
        backup,
        clock,
        thresholds=settings.expiry_notification_days,
        sweep_interval_hours=settings.sweep_interval_hours,
        backup_interval_minutes=settings.backup_interval_minutes,
    )
    scheduler = AsyncIOScheduler(timezone=settings.tz)

    @dp.update.outer_middleware()
    async def inject(handler, event, data):
        data["gate"] = gate
        return await handler(event, data)

    @dp.startup()
    async def on_startup():
        me = await bot.get_me()
        logger.info("Authenticated as @%s (id=%s)", me.username, me.id)
        if not settings.admin_id:
            logger.warning("ADMIN_ID is not set, owner commands are disabled")
        await store.load()
        await expiry.backup()
        expiry.start(scheduler)
        scheduler.start()
        logger.info("AI coaching bot is ready")

    @dp.shutdown()
    async def on_shutdown():
        logger.info("Shutting down...")
        if scheduler.running:
            scheduler.shutdown(wait=False)
        await expiry.backup()

    @dp.errors()
    async def on_error(event: ErrorEvent):
        logger.error("Unhandled error while processing update: %r", event.exception, exc_info=event.exception)
        await expiry.backup()
        return True

    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())

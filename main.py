import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from reboot import config
from reboot.dashboard import RebootDashboard
from reboot.database import SessionLocal, engine
from reboot.errors import StorageUnavailable
from reboot.handlers import start  # shared router; importing the package registers every handler
from reboot.presenters.telegram import TelegramPresenter
from reboot.scheduler import DecisionScheduler
from reboot.services.agent import AgentConfig, DecisionAgent
from reboot.services.clock import local_tz
from reboot.services.store import LogStore


async def main() -> int:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("aiogram").setLevel(logging.INFO)

    if not config.TOKEN or not config.CHAT_ID:
        logging.error("BOT_TOKEN and CHAT_ID must be set (see check_env.py)")
        return 1

    tz = local_tz()
    store = LogStore(engine, SessionLocal, tz=tz)
    try:
        store.init()
    except StorageUnavailable as exc:
        logging.error("Storage unavailable, cannot start: %s", exc)
        return 1

    bot = Bot(
        token=config.TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    presenter = TelegramPresenter(bot, int(config.CHAT_ID), lang=config.LANGUAGE, tz=tz)
    dashboard = RebootDashboard(
        store,
        DecisionAgent(AgentConfig.from_env(), lang=config.LANGUAGE),
        presenter,
        lang=config.LANGUAGE,
        tz=tz,
    )

    dp = Dispatcher()
    dp["dashboard"] = dashboard
    dp.include_router(start.router)

    scheduler = DecisionScheduler(
        dashboard.run_analysis,
        interval_minutes=config.DECISION_INTERVAL_MINUTES,
        initial_delay_seconds=config.DECISION_INITIAL_DELAY_SECONDS,
        timezone=tz,
    )
    scheduler.start()

    logging.info("Reboot dashboard bot started")
    try:
        await dp.start_polling(bot)
    finally:
        scheduler.stop()
        await bot.session.close()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

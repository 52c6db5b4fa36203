#!/usr/bin/env python3
"""
Check the environment before starting the bot.
Run this script to verify settings.
"""

import asyncio

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from reboot import config
from reboot.database import SessionLocal, engine
from reboot.errors import StorageUnavailable
from reboot.services.clock import local_tz
from reboot.services.store import LogStore


async def check_bot() -> bool:
    bot = Bot(token=config.TOKEN)
    try:
        me = await bot.get_me()
        print(f"✅ Bot connected: @{me.username} (id {me.id})")
        return True
    except TelegramAPIError as e:
        print(f"❌ Telegram API error: {e}")
        return False
    finally:
        await bot.session.close()


def main() -> int:
    print("🔍 Environment check:")
    print("=" * 50)
    ok = True

    if config.TOKEN:
        print(f"✅ BOT_TOKEN: {config.TOKEN[:10]}... (found)")
    else:
        print("❌ BOT_TOKEN: NOT FOUND")
        ok = False

    if config.CHAT_ID:
        print(f"✅ CHAT_ID: {config.CHAT_ID}")
    else:
        print("❌ CHAT_ID: NOT FOUND (alerts need an owner chat)")
        ok = False

    print(f"📊 DB_URL: {config.DB_URL}")
    print(f"🌐 LANGUAGE: {config.LANGUAGE}")
    print(f"🕒 TIMEZONE: {local_tz()}")

    store = LogStore(engine, SessionLocal)
    try:
        store.init()
        print(f"✅ Log store opened ({store.count()} logs)")
    except StorageUnavailable as e:
        print(f"❌ Log store unavailable: {e}")
        ok = False

    if config.TOKEN:
        ok = asyncio.run(check_bot()) and ok

    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())

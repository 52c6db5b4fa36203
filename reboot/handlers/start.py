from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from reboot.dashboard import RebootDashboard
from reboot.services.i18n import t

router = Router()


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext, dashboard: RebootDashboard) -> None:
    await state.clear()
    await message.answer(t(dashboard.lang, "bot.welcome"))


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext, dashboard: RebootDashboard) -> None:
    await state.clear()
    await message.answer(t(dashboard.lang, "bot.welcome"))

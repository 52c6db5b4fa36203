from __future__ import annotations

import logging

from aiogram import F
from aiogram.filters import Command
from aiogram.types import BufferedInputFile, CallbackQuery, Message

from .start import router
from reboot.dashboard import RebootDashboard
from reboot.errors import StorageError
from reboot.services.export import dumps
from reboot.services.i18n import t

logger = logging.getLogger(__name__)


@router.message(Command("stats"))
async def cmd_stats(message: Message, dashboard: RebootDashboard) -> None:
    try:
        await dashboard.load_and_render()
    except StorageError as exc:
        logger.error("Failed to render dashboard: %s", exc)
        await message.answer(t(dashboard.lang, "ui.load_failed"))
        return
    status = getattr(dashboard.presenter, "last_status", None)
    if status:
        await message.answer(f"🤖 {status}")


@router.message(Command("export"))
async def cmd_export(message: Message, dashboard: RebootDashboard) -> None:
    result = await dashboard.export()
    if result is None:
        return
    filename, document = result
    payload = dumps(document).encode("utf-8")
    await message.answer_document(BufferedInputFile(payload, filename=filename))


@router.callback_query(F.data == "alert:dismiss")
async def handle_alert_dismiss(call: CallbackQuery, dashboard: RebootDashboard) -> None:
    await call.answer()
    await dashboard.dismiss_alert()

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from aiogram import F
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.types import CallbackQuery, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder

from .start import router
from reboot.dashboard import RebootDashboard
from reboot.errors import StorageError
from reboot.services.i18n import t, type_label
from reboot.services.validation import KNOWN_TYPES, SCORE_MAX, SCORE_MIN

logger = logging.getLogger(__name__)

DURATION_CHOICES = (15, 30, 60, 90)


class LogStates(StatesGroup):
    waiting_type = State()
    waiting_duration = State()
    waiting_fatigue = State()
    waiting_recovery = State()
    waiting_notes = State()


def _build_type_kb(lang: str) -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    for kind in KNOWN_TYPES:
        kb.button(text=type_label(lang, kind), callback_data=f"log:type:{kind}")
    kb.adjust(2)
    return kb


def _build_duration_kb() -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    for minutes in DURATION_CHOICES:
        kb.button(text=f"{minutes}", callback_data=f"log:duration:{minutes}")
    kb.adjust(4)
    return kb


def _build_score_kb(prefix: str) -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    for score in range(SCORE_MIN, SCORE_MAX + 1):
        kb.button(text=str(score), callback_data=f"log:{prefix}:{score}")
    kb.adjust(5, 5)
    return kb


def _build_notes_kb(lang: str) -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    kb.button(text=t(lang, "bot.skip"), callback_data="log:notes:skip")
    kb.adjust(1)
    return kb


def draft_from_state(data: dict, notes: Optional[str], when: datetime) -> dict:
    """Form-like payload for RebootDashboard.submit_log from collected FSM data."""
    return {
        "timestamp": when.strftime("%Y-%m-%dT%H:%M"),
        "duration": data.get("duration"),
        "type": data.get("type"),
        "preFatigue": data.get("pre_fatigue"),
        "postRecovery": data.get("post_recovery"),
        "notes": notes,
    }


@router.message(Command("log"))
async def cmd_log(message: Message, state: FSMContext, dashboard: RebootDashboard) -> None:
    await state.clear()
    await state.set_state(LogStates.waiting_type)
    await message.answer(t(dashboard.lang, "bot.ask_type"), reply_markup=_build_type_kb(dashboard.lang).as_markup())


@router.callback_query(LogStates.waiting_type, F.data.startswith("log:type:"))
async def handle_type(call: CallbackQuery, state: FSMContext, dashboard: RebootDashboard) -> None:
    kind = call.data.split(":", 2)[2]
    await state.update_data(type=kind)
    await state.set_state(LogStates.waiting_duration)
    await call.message.edit_text(t(dashboard.lang, "bot.ask_duration"), reply_markup=_build_duration_kb().as_markup())
    await call.answer()


async def _ask_fatigue(message: Message, state: FSMContext, lang: str, edit: bool) -> None:
    await state.set_state(LogStates.waiting_fatigue)
    markup = _build_score_kb("fatigue").as_markup()
    if edit:
        await message.edit_text(t(lang, "bot.ask_fatigue"), reply_markup=markup)
    else:
        await message.answer(t(lang, "bot.ask_fatigue"), reply_markup=markup)


@router.callback_query(LogStates.waiting_duration, F.data.startswith("log:duration:"))
async def handle_duration(call: CallbackQuery, state: FSMContext, dashboard: RebootDashboard) -> None:
    await state.update_data(duration=int(call.data.split(":")[2]))
    await _ask_fatigue(call.message, state, dashboard.lang, edit=True)
    await call.answer()


@router.message(LogStates.waiting_duration)
async def handle_manual_duration(message: Message, state: FSMContext, dashboard: RebootDashboard) -> None:
    text = (message.text or "").strip()
    if not text.isdigit():
        await message.answer(t(dashboard.lang, "bot.invalid_number"))
        return
    await state.update_data(duration=int(text))
    await _ask_fatigue(message, state, dashboard.lang, edit=False)


@router.callback_query(LogStates.waiting_fatigue, F.data.startswith("log:fatigue:"))
async def handle_fatigue(call: CallbackQuery, state: FSMContext, dashboard: RebootDashboard) -> None:
    await state.update_data(pre_fatigue=int(call.data.split(":")[2]))
    await state.set_state(LogStates.waiting_recovery)
    await call.message.edit_text(t(dashboard.lang, "bot.ask_recovery"), reply_markup=_build_score_kb("recovery").as_markup())
    await call.answer()


@router.callback_query(LogStates.waiting_recovery, F.data.startswith("log:recovery:"))
async def handle_recovery(call: CallbackQuery, state: FSMContext, dashboard: RebootDashboard) -> None:
    await state.update_data(post_recovery=int(call.data.split(":")[2]))
    await state.set_state(LogStates.waiting_notes)
    await call.message.edit_text(t(dashboard.lang, "bot.ask_notes"), reply_markup=_build_notes_kb(dashboard.lang).as_markup())
    await call.answer()


async def _finish(state: FSMContext, dashboard: RebootDashboard, notes: Optional[str]) -> None:
    data = await state.get_data()
    await state.clear()
    await dashboard.submit_log(draft_from_state(data, notes, datetime.now(dashboard.tz)))


@router.callback_query(LogStates.waiting_notes, F.data == "log:notes:skip")
async def handle_notes_skip(call: CallbackQuery, state: FSMContext, dashboard: RebootDashboard) -> None:
    await call.message.delete_reply_markup()
    await call.answer()
    await _finish(state, dashboard, None)


@router.message(LogStates.waiting_notes)
async def handle_notes(message: Message, state: FSMContext, dashboard: RebootDashboard) -> None:
    await _finish(state, dashboard, message.text)


@router.message(Command("logs"))
async def cmd_logs(message: Message, dashboard: RebootDashboard) -> None:
    try:
        logs = dashboard.store.get_all_logs()
    except StorageError as exc:
        logger.error("Failed to list logs: %s", exc)
        await message.answer(t(dashboard.lang, "ui.load_failed"))
        return
    await dashboard.presenter.render_logs(logs)


@router.callback_query(F.data.startswith("log:del:"))
async def handle_delete(call: CallbackQuery, dashboard: RebootDashboard) -> None:
    log_id = int(call.data.split(":")[2])
    await call.answer()
    await dashboard.delete_log(log_id)


@router.callback_query(F.data.startswith("log:"))
async def handle_stale_step(call: CallbackQuery, dashboard: RebootDashboard) -> None:
    # Keyboard from a finished or cancelled /log flow.
    await call.answer(t(dashboard.lang, "bot.flow_expired"), show_alert=True)

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import List, Optional, Sequence

from aiogram import Bot, html
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.keyboard import InlineKeyboardBuilder

from reboot.models.log_entry import LogEntry
from reboot.services.agent import Decision, status_label
from reboot.services.clock import local_tz, to_local
from reboot.services.i18n import DEFAULT_LANG, t, type_emoji, type_label, type_name

logger = logging.getLogger(__name__)

MAX_LISTED_LOGS = 20


def format_log_line(log: LogEntry, lang: str, tz: Optional[tzinfo] = None) -> str:
    when = to_local(log.timestamp, tz or local_tz()).strftime("%m/%d %H:%M")
    improvement = log.post_recovery - log.pre_fatigue
    sign = "+" if improvement > 0 else ""
    line = (
        f"{type_emoji(log.type)} {html.bold(type_name(lang, log.type))}  {when}\n"
        f"⏱️ {t(lang, 'logs.minutes', minutes=log.duration_minutes)}  "
        f"📊 {log.pre_fatigue} → {log.post_recovery} ({sign}{improvement})"
    )
    if log.notes:
        line += f"\n{html.italic(html.quote(log.notes))}"
    return line


def format_logs(logs: Sequence[LogEntry], lang: str = DEFAULT_LANG, tz: Optional[tzinfo] = None) -> str:
    if not logs:
        return t(lang, "logs.empty")
    lines = [html.bold(t(lang, "logs.title"))]
    lines.extend(format_log_line(log, lang, tz) for log in logs[:MAX_LISTED_LOGS])
    return "\n\n".join(lines)


def format_stats(stats: dict, lang: str = DEFAULT_LANG) -> str:
    best = stats.get("best_reboot")
    return "\n".join([
        html.bold(t(lang, "stats.title")),
        t(lang, "stats.total", value=stats.get("total_reboots", 0)),
        t(lang, "stats.avg", value=stats.get("avg_recovery", 0)),
        t(lang, "stats.best", value=type_label(lang, best) if best else "--"),
        t(lang, "stats.streak", value=stats.get("streak_days", 0)),
    ])


def format_insights(insights: List[dict], lang: str = DEFAULT_LANG) -> str:
    lines = [html.bold(t(lang, "insights.title"))]
    if not insights:
        lines.append(f"💡 {t(lang, 'insight.empty')}")
    lines.extend(f"{item['icon']} {item['text']}" for item in insights)
    return "\n".join(lines)


def format_health(health: dict, lang: str = DEFAULT_LANG) -> str:
    return "\n".join([
        html.bold(t(lang, "health.title")),
        t(lang, "health.score", value=health["score"]),
        t(lang, "health.focus", value=health["focus"]),
        t(lang, "health.fatigue", value=health["fatigue"]),
        t(lang, "health.recovery", value=health["recovery"]),
    ])


def build_alert_kb(lang: str) -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    kb.button(text=t(lang, "bot.dismiss"), callback_data="alert:dismiss")
    kb.adjust(1)
    return kb


def build_logs_kb(logs: Sequence[LogEntry], lang: str) -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    for log in logs[:MAX_LISTED_LOGS]:
        kb.button(text=f"{t(lang, 'bot.delete')} {log.date} {type_emoji(log.type)}", callback_data=f"log:del:{log.id}")
    kb.adjust(1)
    return kb


class TelegramPresenter:
    """Presenter that renders into the owner's Telegram chat."""

    def __init__(self, bot: Bot, chat_id: int, lang: str = DEFAULT_LANG, tz: Optional[tzinfo] = None):
        self.bot = bot
        self.chat_id = chat_id
        self.lang = lang
        self.tz = tz
        self.last_status: Optional[str] = None
        self._alert_message_id: Optional[int] = None

    async def _send(self, text: str, reply_markup=None):
        try:
            return await self.bot.send_message(self.chat_id, text, reply_markup=reply_markup)
        except TelegramAPIError as exc:
            logger.error("Failed to send message to chat_id=%s: %s", self.chat_id, exc)
            return None

    async def render_logs(self, logs: Sequence[LogEntry]) -> None:
        markup = build_logs_kb(logs, self.lang).as_markup() if logs else None
        await self._send(format_logs(logs, self.lang, self.tz), reply_markup=markup)

    async def render_stats(self, stats: dict) -> None:
        await self._send(format_stats(stats, self.lang))

    async def render_insights(self, insights: List[dict]) -> None:
        await self._send(format_insights(insights, self.lang))

    async def render_health_status(self, health: dict) -> None:
        await self._send(format_health(health, self.lang))

    async def show_alert(self, decision: Decision) -> None:
        await self.dismiss_alert()
        sent = await self._send(html.quote(decision.message), reply_markup=build_alert_kb(self.lang).as_markup())
        if sent is not None:
            self._alert_message_id = sent.message_id

    async def dismiss_alert(self) -> None:
        if self._alert_message_id is None:
            return
        message_id, self._alert_message_id = self._alert_message_id, None
        try:
            await self.bot.delete_message(self.chat_id, message_id)
        except TelegramAPIError as exc:
            logger.info("Alert message %s already gone: %s", message_id, exc)

    async def update_ai_status(self, confidence: int) -> None:
        # Shown with the next /stats render.
        self.last_status = status_label(confidence, self.lang)

    async def show_success(self, message: str) -> None:
        await self._send(f"✅ {message}")

    async def show_error(self, message: str) -> None:
        await self._send(f"❌ {message}")

import asyncio
from types import SimpleNamespace

from conftest import hours_ago
from reboot.presenters.telegram import (
    MAX_LISTED_LOGS,
    TelegramPresenter,
    build_logs_kb,
    format_health,
    format_log_line,
    format_logs,
    format_stats,
)
from reboot.services.agent import Decision


class FakeBot:
    def __init__(self):
        self.sent = []
        self.deleted = []

    async def send_message(self, chat_id, text, reply_markup=None):
        self.sent.append((chat_id, text, reply_markup))
        return SimpleNamespace(message_id=len(self.sent))

    async def delete_message(self, chat_id, message_id):
        self.deleted.append((chat_id, message_id))


class TestFormatting:
    def test_empty_logs(self):
        assert "まだログがありません" in format_logs([])

    def test_log_line_shows_improvement_and_escapes_notes(self, now):
        log = hours_ago(now, 1, type="sleep", pre_fatigue=4, post_recovery=9, duration=20, notes="<b>nap</b>")
        line = format_log_line(log, "ja")
        assert "😴" in line
        assert "4 → 9 (+5)" in line
        assert "20分" in line
        assert "&lt;b&gt;nap&lt;/b&gt;" in line

    def test_log_list_is_capped(self, now):
        logs = [hours_ago(now, h) for h in range(MAX_LISTED_LOGS + 5)]
        assert format_logs(logs).count("📊") == MAX_LISTED_LOGS
        assert len(list(build_logs_kb(logs, "ja").buttons)) == MAX_LISTED_LOGS

    def test_stats_without_best(self):
        text = format_stats({"total_reboots": 0, "avg_recovery": 0, "best_reboot": None, "streak_days": 0}, "en")
        assert "Best reboot: --" in text

    def test_health(self):
        text = format_health({"score": 63, "focus": 60, "fatigue": 50, "recovery": 70}, "en")
        assert "Score: 63" in text


class TestTelegramPresenter:
    def test_alert_then_dismiss(self):
        bot = FakeBot()
        presenter = TelegramPresenter(bot, chat_id=1, lang="en")

        async def scenario():
            await presenter.show_alert(Decision(should_alert=True, confidence=72, message="go", action="reboot_now"))
            await presenter.dismiss_alert()
            await presenter.dismiss_alert()

        asyncio.run(scenario())
        assert bot.sent[0][1] == "go"
        assert bot.deleted == [(1, 1)]

    def test_status_is_recorded(self):
        presenter = TelegramPresenter(FakeBot(), chat_id=1, lang="en")
        asyncio.run(presenter.update_ai_status(85))
        assert presenter.last_status == "AI monitoring (high confidence)"

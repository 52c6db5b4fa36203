from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Mapping, Optional, Tuple

from reboot.errors import StorageError, ValidationError
from reboot.presenters.base import Presenter
from reboot.services import analytics
from reboot.services.agent import Decision, DecisionAgent
from reboot.services.clock import local_tz, now_ms
from reboot.services.export import build_export, export_filename
from reboot.services.i18n import DEFAULT_LANG, t
from reboot.services.store import LogStore
from reboot.services.validation import parse_draft

logger = logging.getLogger(__name__)

SNAPSHOT_CACHE_KEY = "dashboard_snapshot"


class RebootDashboard:
    """Composes the store, analytics and agent and pushes results to a presenter."""

    def __init__(
        self,
        store: LogStore,
        agent: DecisionAgent,
        presenter: Presenter,
        lang: str = DEFAULT_LANG,
        tz: Optional[tzinfo] = None,
    ):
        self.store = store
        self.agent = agent
        self.presenter = presenter
        self.lang = lang
        self.tz = tz or local_tz()

    def summarize(self, now: Optional[int] = None) -> dict:
        """Read every log and derive stats, insights and health."""
        now = now if now is not None else now_ms()
        logs = self.store.get_all_logs()
        return {
            "logs": logs,
            "stats": analytics.calculate_stats(logs, now, self.tz),
            "insights": analytics.generate_insights(logs, now, self.tz, self.lang),
            "health": analytics.get_current_health(logs, now),
        }

    async def load_and_render(self) -> dict:
        snapshot = self.summarize()
        await self.presenter.render_logs(snapshot["logs"])
        await self.presenter.render_stats(snapshot["stats"])
        await self.presenter.render_insights(snapshot["insights"])
        await self.presenter.render_health_status(snapshot["health"])

        cached = {key: value for key, value in snapshot.items() if key != "logs"}
        try:
            self.store.save_cache(SNAPSHOT_CACHE_KEY, cached)
        except StorageError as exc:
            logger.warning("Could not cache dashboard snapshot: %s", exc)
        return snapshot

    async def submit_log(self, raw: Mapping[str, Any]):
        """Validate and save a draft, re-render and re-evaluate. Returns the entry or None."""
        try:
            draft = parse_draft(raw)
        except ValidationError as exc:
            logger.info("Rejected log draft: %s", exc)
            if exc.field == "type":
                await self.presenter.show_error(t(self.lang, "ui.type_required"))
            else:
                await self.presenter.show_error(t(self.lang, "ui.invalid_input", field=exc.field))
            return None

        try:
            entry = self.store.save_log(draft)
        except StorageError as exc:
            logger.error("Log submit failed: %s", exc)
            await self.presenter.show_error(t(self.lang, "ui.save_failed"))
            return None

        # The entry is committed here.
        await self.presenter.show_success(t(self.lang, "ui.saved"))
        await self._refresh(reevaluate=True)
        return entry

    async def delete_log(self, log_id: int) -> bool:
        try:
            self.store.delete_log(log_id)
        except StorageError as exc:
            logger.error("Delete failed for id=%s: %s", log_id, exc)
            await self.presenter.show_error(t(self.lang, "ui.delete_failed"))
            return False
        await self.presenter.show_success(t(self.lang, "ui.deleted"))
        await self._refresh()
        return True

    async def _refresh(self, reevaluate: bool = False) -> None:
        try:
            await self.load_and_render()
            if reevaluate:
                await self.run_analysis()
        except StorageError as exc:
            logger.error("Refresh after write failed: %s", exc)
            await self.presenter.show_error(t(self.lang, "ui.load_failed"))

    async def export(self) -> Optional[Tuple[str, dict]]:
        """(filename, document) for a JSON backup, or None when reading fails."""
        now = now_ms()
        try:
            logs = self.store.get_all_logs()
        except StorageError as exc:
            logger.error("Export failed: %s", exc)
            await self.presenter.show_error(t(self.lang, "ui.export_failed"))
            return None
        document = build_export(logs, now, self.tz)
        await self.presenter.show_success(t(self.lang, "ui.exported"))
        return export_filename(now, self.tz), document

    async def run_analysis(self) -> Decision:
        logs = self.store.get_all_logs()
        decision = self.agent.analyze_and_decide(logs, now_ms())
        logger.info(
            "Agent decision: alert=%s action=%s confidence=%s",
            decision.should_alert, decision.action, decision.confidence,
        )
        if decision.should_alert:
            await self.presenter.show_alert(decision)
        await self.presenter.update_ai_status(decision.confidence)
        return decision

    async def dismiss_alert(self) -> None:
        await self.presenter.dismiss_alert()

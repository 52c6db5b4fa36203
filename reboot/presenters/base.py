from __future__ import annotations

from typing import List, Protocol, Sequence

from reboot.models.log_entry import LogEntry
from reboot.services.agent import Decision


class Presenter(Protocol):
    """Callbacks through which the core talks to whatever UI renders it."""

    async def render_logs(self, logs: Sequence[LogEntry]) -> None: ...

    async def render_stats(self, stats: dict) -> None: ...

    async def render_insights(self, insights: List[dict]) -> None: ...

    async def render_health_status(self, health: dict) -> None: ...

    async def show_alert(self, decision: Decision) -> None: ...

    async def dismiss_alert(self) -> None: ...

    async def update_ai_status(self, confidence: int) -> None: ...

    async def show_success(self, message: str) -> None: ...

    async def show_error(self, message: str) -> None: ...

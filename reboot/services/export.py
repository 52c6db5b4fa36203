from __future__ import annotations

import json
from datetime import datetime, timezone, tzinfo
from typing import Optional, Sequence

from reboot.models.log_entry import LogEntry
from reboot.services.analytics import calculate_stats, newest_first
from reboot.services.clock import iso_date, now_ms

EXPORT_VERSION = "2.0.0"


def build_export(logs: Sequence[LogEntry], now: Optional[int] = None, tz: Optional[tzinfo] = None) -> dict:
    """Backup document {version, exportDate, logs, stats} with camelCase keys."""
    now = now if now is not None else now_ms()
    stats = calculate_stats(logs, now, tz)
    exported_at = datetime.fromtimestamp(now / 1000, timezone.utc)
    return {
        "version": EXPORT_VERSION,
        "exportDate": exported_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "logs": [log.to_dict() for log in newest_first(logs)],
        "stats": {
            "totalReboots": stats["total_reboots"],
            "avgRecovery": stats["avg_recovery"],
            "bestReboot": stats["best_reboot"],
            "streakDays": stats["streak_days"],
            "totalMinutes": stats["total_minutes"],
            "avgDuration": stats["avg_duration"],
        },
    }


def export_filename(now: Optional[int] = None, tz: Optional[tzinfo] = None) -> str:
    return f"reboot-logs-{iso_date(now if now is not None else now_ms(), tz)}.json"


def dumps(document: dict) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2)

"""
Statistics, insights and the current health snapshot.

Every function here is pure over (logs, now): logs is the full history as
returned by LogStore.get_all_logs(), now is epoch milliseconds. Nothing here
raises on odd input; an empty history yields the neutral defaults.
"""
from __future__ import annotations

import math
from collections import Counter
from datetime import date, tzinfo
from typing import Dict, List, Optional, Sequence, Tuple

from reboot.models.log_entry import LogEntry
from reboot.services.clock import DAY_MS, HOUR_MS, local_tz, now_ms, to_local
from reboot.services.i18n import DEFAULT_LANG, t, type_label

PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}

WEEKLY_TARGET = 7
STREAK_HABIT_DAYS = 7
PEAK_HOUR_MIN_LOGS = 10

NEUTRAL_HEALTH = {"score": 50, "focus": 50, "fatigue": 50, "recovery": 50}
STALE_HEALTH = {"score": 50, "focus": 50, "fatigue": 70, "recovery": 30}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round1(value: float) -> float:
    return round_half_up(value * 10) / 10


def newest_first(logs: Sequence[LogEntry]) -> List[LogEntry]:
    # Stable, so equal timestamps keep the store's insertion order.
    return sorted(logs, key=lambda log: log.timestamp, reverse=True)


def type_statistics(logs: Sequence[LogEntry]) -> Dict[str, dict]:
    """Per-type count, mean post-recovery and total minutes, in first-seen order."""
    stats: Dict[str, dict] = {}
    for log in logs:
        entry = stats.setdefault(log.type, {"count": 0, "total_recovery": 0, "total_minutes": 0})
        entry["count"] += 1
        entry["total_recovery"] += log.post_recovery
        entry["total_minutes"] += log.duration_minutes or 0
    for entry in stats.values():
        entry["avg_recovery"] = entry["total_recovery"] / entry["count"]
    return stats


def best_type(logs: Sequence[LogEntry]) -> Optional[Tuple[str, float]]:
    """(type, mean post-recovery) of the best type; exact ties go to the lexicographically first name."""
    stats = type_statistics(logs)
    if not stats:
        return None
    kind = min(stats, key=lambda k: (-stats[k]["avg_recovery"], k))
    return kind, stats[kind]["avg_recovery"]


def calculate_streak(logs: Sequence[LogEntry], now: Optional[int] = None, tz: Optional[tzinfo] = None) -> int:
    """Consecutive calendar days ending today with at least one log each."""
    if not logs:
        return 0
    tz = tz or local_tz()
    today = to_local(now if now is not None else now_ms(), tz).date()
    days = sorted({date.fromisoformat(log.date) for log in logs}, reverse=True)

    streak = 0
    for day in days:
        gap = (today - day).days
        if gap < 0:
            continue  # future-dated entry
        if gap == streak:
            streak += 1
        else:
            break
    return streak


def _mean_recovery(logs: Sequence[LogEntry]) -> float:
    return sum(log.post_recovery for log in logs) / len(logs)


def calculate_stats(logs: Sequence[LogEntry], now: Optional[int] = None, tz: Optional[tzinfo] = None) -> dict:
    if not logs:
        return {
            "total_reboots": 0,
            "avg_recovery": 0,
            "best_reboot": None,
            "streak_days": 0,
            "total_minutes": 0,
            "avg_duration": 0,
        }

    total = len(logs)
    total_minutes = sum(log.duration_minutes or 0 for log in logs)
    best = best_type(logs)
    return {
        "total_reboots": total,
        "avg_recovery": round1(_mean_recovery(logs)),
        "best_reboot": best[0] if best else None,
        "streak_days": calculate_streak(logs, now, tz),
        "total_minutes": total_minutes,
        "avg_duration": round_half_up(total_minutes / total),
    }


def _peak_hour(logs: Sequence[LogEntry], tz: tzinfo) -> Optional[int]:
    if len(logs) < PEAK_HOUR_MIN_LOGS:
        return None
    counts = Counter(to_local(log.timestamp, tz).hour for log in logs)
    # Most frequent hour; ties go to the earliest hour.
    return min(counts, key=lambda hour: (-counts[hour], hour))


def _period_key(hour: int) -> str:
    if hour < 12:
        return "period.morning"
    if hour < 18:
        return "period.afternoon"
    return "period.evening"


def generate_insights(
    logs: Sequence[LogEntry],
    now: Optional[int] = None,
    tz: Optional[tzinfo] = None,
    lang: str = DEFAULT_LANG,
) -> List[dict]:
    """Ranked list of {icon, text, priority} built from fixed heuristics."""
    if not logs:
        return [{"icon": "💡", "text": t(lang, "insight.empty"), "priority": "low"}]

    now = now if now is not None else now_ms()
    tz = tz or local_tz()
    insights: List[dict] = []

    best = best_type(logs)
    if best:
        insights.append({
            "icon": "🏆",
            "text": t(lang, "insight.best_type", label=type_label(lang, best[0])),
            "priority": "high",
        })

    weekly = [log for log in logs if now - log.timestamp < 7 * DAY_MS]
    if len(weekly) < WEEKLY_TARGET:
        insights.append({
            "icon": "⚠️",
            "text": t(lang, "insight.low_frequency", count=len(weekly)),
            "priority": "medium",
        })
    else:
        insights.append({
            "icon": "✨",
            "text": t(lang, "insight.good_frequency", count=len(weekly)),
            "priority": "low",
        })

    avg = _mean_recovery(logs)
    if avg < 5:
        insights.append({"icon": "📉", "text": t(lang, "insight.declining"), "priority": "high"})
    elif avg >= 7:
        insights.append({
            "icon": "🎯",
            "text": t(lang, "insight.optimized", avg=f"{round1(avg):.1f}"),
            "priority": "low",
        })

    streak = calculate_streak(logs, now, tz)
    if streak >= STREAK_HABIT_DAYS:
        insights.append({"icon": "🔥", "text": t(lang, "insight.streak", days=streak), "priority": "low"})

    hour = _peak_hour(logs, tz)
    if hour is not None:
        insights.append({
            "icon": "⏰",
            "text": t(lang, "insight.peak_hour", period=t(lang, _period_key(hour)), hour=hour),
            "priority": "medium",
        })

    return sorted(insights, key=lambda item: -PRIORITY_RANK[item["priority"]])


def get_current_health(logs: Sequence[LogEntry], now: Optional[int] = None) -> dict:
    """Synthesized {score, focus, fatigue, recovery} from the newest log and elapsed time."""
    if not logs:
        return dict(NEUTRAL_HEALTH)

    now = now if now is not None else now_ms()
    newest = newest_first(logs)[0]
    if now - newest.timestamp >= DAY_MS:
        return dict(STALE_HEALTH)

    hours = max(now - newest.timestamp, 0) / HOUR_MS
    recovery = max(newest.post_recovery * 10 - min(hours * 5, 30), 0)
    fatigue = min(100 - recovery + 20, 100)
    focus = max(recovery - 10, 0)
    score = round_half_up(recovery * 0.5 + focus * 0.3 + (100 - fatigue) * 0.2)

    return {
        "score": score,
        "focus": round_half_up(focus),
        "fatigue": round_half_up(fatigue),
        "recovery": round_half_up(recovery),
    }
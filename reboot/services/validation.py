from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from reboot.errors import ValidationError

KNOWN_TYPES = ("spa", "sleep", "cycling", "meditation")
SCORE_MIN = 1
SCORE_MAX = 10


@dataclass(frozen=True)
class LogDraft:
    """A log as submitted by the presentation layer, before id/date/createdAt exist."""
    timestamp: str  # ISO local datetime, e.g. "2026-10-19T08:30"
    duration_minutes: int
    type: str
    pre_fatigue: int
    post_recovery: int
    notes: Optional[str] = None


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field=field)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field=field) from None


def _score(value: Any, field: str) -> int:
    if value is None:
        raise ValidationError(f"{field} is required", field=field)
    score = _as_int(value, field)
    if not SCORE_MIN <= score <= SCORE_MAX:
        raise ValidationError(f"{field} must be between {SCORE_MIN} and {SCORE_MAX}", field=field)
    return score


def parse_draft(raw: Mapping[str, Any]) -> LogDraft:
    """Validate form-like input into a LogDraft.

    Accepts camelCase keys as sent by the web form (duration, preFatigue,
    postRecovery) as well as snake_case ones. Raises ValidationError naming the
    first offending field.
    """
    kind = str(_pick(raw, "type") or "").strip()
    if not kind:
        raise ValidationError("type is required", field="type")

    timestamp = str(_pick(raw, "timestamp") or "").strip()
    if not timestamp:
        raise ValidationError("timestamp is required", field="timestamp")
    try:
        datetime.fromisoformat(timestamp)
    except ValueError:
        raise ValidationError(f"timestamp is not an ISO datetime: {timestamp!r}", field="timestamp") from None

    duration_raw = _pick(raw, "duration_minutes", "durationMinutes", "duration")
    duration = 0 if duration_raw in (None, "") else _as_int(duration_raw, "duration_minutes")
    if duration < 0:
        raise ValidationError("duration_minutes must be >= 0", field="duration_minutes")

    pre = _score(_pick(raw, "pre_fatigue", "preFatigue"), "pre_fatigue")
    post = _score(_pick(raw, "post_recovery", "postRecovery"), "post_recovery")

    notes = _pick(raw, "notes")
    notes = str(notes).strip() if notes is not None else ""

    return LogDraft(
        timestamp=timestamp,
        duration_minutes=duration,
        type=kind,
        pre_fatigue=pre,
        post_recovery=post,
        notes=notes or None,
    )

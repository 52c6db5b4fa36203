"""
Rule-based decision agent.

Looks at the log history and the current time and decides whether to nudge
the user to recover now. Deterministic and state-free: the same (logs, now)
always produce the same Decision.
"""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Optional, Sequence

from reboot import config
from reboot.models.log_entry import LogEntry
from reboot.services.analytics import best_type, newest_first, round_half_up
from reboot.services.clock import DAY_MS, MINUTE_MS, now_ms
from reboot.services.i18n import DEFAULT_LANG, t, type_emoji, type_name

logger = logging.getLogger(__name__)

ACTION_NONE = "none"
ACTION_REBOOT_NOW = "reboot_now"
ACTION_REBOOT_SOON = "reboot_soon"
ACTION_TAKE_BREAK = "take_break"
ACTION_CHANGE_METHOD = "change_method"

PATTERN_INSUFFICIENT = "insufficient_data"
PATTERN_DECLINING = "declining"
PATTERN_CHRONIC = "chronic"
PATTERN_NORMAL = "normal"

BEST_TYPE_MIN_LOGS = 5
CHRONIC_SHARE = 0.7


@dataclass(frozen=True)
class AgentConfig:
    fatigue_threshold: int = 7
    optimal_reboot_interval: int = 180  # minutes
    low_recovery_threshold: int = 4

    @classmethod
    def from_env(cls) -> "AgentConfig":
        return cls(
            fatigue_threshold=config.FATIGUE_THRESHOLD,
            optimal_reboot_interval=config.OPTIMAL_REBOOT_INTERVAL,
            low_recovery_threshold=config.LOW_RECOVERY_THRESHOLD,
        )


@dataclass
class Decision:
    should_alert: bool = False
    confidence: int = 0
    message: str = ""
    action: str = ACTION_NONE
    analysis: Optional[dict] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return asdict(self)


def status_label(confidence: int, lang: str = DEFAULT_LANG) -> str:
    if confidence > 70:
        return t(lang, "status.high")
    if confidence > 0:
        return t(lang, "status.active")
    return t(lang, "status.standby")


class DecisionAgent:
    def __init__(self, agent_config: Optional[AgentConfig] = None, lang: str = DEFAULT_LANG):
        self.config = agent_config or AgentConfig()
        self.lang = lang

    def analyze_and_decide(self, logs: Sequence[LogEntry], now: Optional[int] = None) -> Decision:
        if not logs:
            return Decision()
        now = now if now is not None else now_ms()
        analysis = self.analyze(newest_first(logs), now)
        return self.decide(analysis)

    def analyze(self, logs: Sequence[LogEntry], now: int) -> dict:
        """Feature snapshot over newest-first logs."""
        newest = logs[0]
        recent = [log for log in logs if now - log.timestamp < DAY_MS]
        weekly = [log for log in logs if now - log.timestamp < 7 * DAY_MS]

        minutes_since = (now - newest.timestamp) / MINUTE_MS
        avg_recovery = (
            sum(log.post_recovery for log in weekly) / len(weekly) if weekly else 5
        )

        best = None
        if len(logs) >= BEST_TYPE_MIN_LOGS:
            found = best_type(logs)
            if found:
                best = {"type": found[0], "avg_recovery": found[1]}

        return {
            "time_since_last_reboot": minutes_since,
            "avg_recovery": avg_recovery,
            "fatigue_pattern": self.detect_fatigue_pattern(recent),
            "best_reboot_type": best,
            "estimated_fatigue": self.estimate_current_fatigue(newest, minutes_since),
            "recent_reboot_count": len(recent),
            "weekly_reboot_count": len(weekly),
        }

    def detect_fatigue_pattern(self, recent: Sequence[LogEntry]) -> str:
        """Classify the trailing-24h entries (newest first)."""
        if len(recent) < 3:
            return PATTERN_INSUFFICIENT

        r0, r1, r2 = (log.post_recovery for log in recent[:3])
        if r0 < r1 < r2:
            return PATTERN_DECLINING

        tired = sum(1 for log in recent if log.pre_fatigue >= self.config.fatigue_threshold)
        if tired >= len(recent) * CHRONIC_SHARE:
            return PATTERN_CHRONIC

        return PATTERN_NORMAL

    @staticmethod
    def estimate_current_fatigue(newest: LogEntry, minutes_since: float) -> float:
        baseline = newest.pre_fatigue - (newest.post_recovery - newest.pre_fatigue)
        accumulation = min((minutes_since / 60) * 0.5, 5)
        return min(max(baseline + accumulation, 1), 10)

    def decide(self, analysis: dict) -> Decision:
        # Rules run in order and a later match overwrites an earlier one;
        # only R4 defers to anything already raised.
        cfg = self.config
        lang = self.lang
        minutes = analysis["time_since_last_reboot"]
        pattern = analysis["fatigue_pattern"]
        decision = Decision(analysis=analysis)
        confidence: float = 0

        if minutes > cfg.optimal_reboot_interval:
            decision.should_alert = True
            confidence = min(70 + (minutes - cfg.optimal_reboot_interval) / 10, 95)
            decision.action = ACTION_REBOOT_NOW
            decision.message = t(
                lang, "alert.overdue",
                hours=math.floor(minutes / 60),
                minutes=math.floor(minutes % 60),
            )
            best = analysis["best_reboot_type"]
            if best:
                decision.message += t(
                    lang, "alert.recommend",
                    emoji=type_emoji(best["type"]),
                    name=type_name(lang, best["type"]),
                    avg=f"{best['avg_recovery']:.1f}",
                )

        if pattern == PATTERN_CHRONIC:
            decision.should_alert = True
            confidence = 85
            decision.action = ACTION_TAKE_BREAK
            decision.message = t(lang, "alert.chronic")

        if pattern == PATTERN_DECLINING and analysis["avg_recovery"] < cfg.low_recovery_threshold:
            decision.should_alert = True
            confidence = 75
            decision.action = ACTION_CHANGE_METHOD
            decision.message = t(lang, "alert.change_method")

        fatigue = analysis["estimated_fatigue"]
        if not decision.should_alert and fatigue >= cfg.fatigue_threshold:
            decision.should_alert = True
            confidence = 65
            decision.action = ACTION_REBOOT_SOON
            decision.message = t(lang, "alert.reboot_soon", fatigue=f"{fatigue:.1f}")

        decision.confidence = round_half_up(confidence)
        logger.debug(
            "Decision alert=%s action=%s confidence=%s pattern=%s",
            decision.should_alert, decision.action, decision.confidence, pattern,
        )
        return decision

"""
Decision agent golden decisions.
"""

from conftest import hours_ago, minutes_ago
from reboot.services.agent import (
    ACTION_CHANGE_METHOD,
    ACTION_NONE,
    ACTION_REBOOT_NOW,
    ACTION_REBOOT_SOON,
    ACTION_TAKE_BREAK,
    PATTERN_CHRONIC,
    PATTERN_DECLINING,
    PATTERN_INSUFFICIENT,
    PATTERN_NORMAL,
    AgentConfig,
    Decision,
    DecisionAgent,
    status_label,
)


def agent(**kwargs):
    return DecisionAgent(AgentConfig(**kwargs))


class TestEmptyHistory:
    def test_no_logs_no_alert(self, now):
        decision = agent().analyze_and_decide([], now)
        assert decision == Decision(should_alert=False, confidence=0, message="", action=ACTION_NONE)


class TestOverdueRule:
    def test_two_hundred_minutes_without_best_type(self, now):
        logs = [minutes_ago(now, 200, pre_fatigue=3, post_recovery=8)]
        decision = agent().analyze_and_decide(logs, now)

        assert decision.should_alert is True
        assert decision.action == ACTION_REBOOT_NOW
        assert decision.confidence == 72
        assert "3時間20分" in decision.message
        assert "おすすめ" not in decision.message

    def test_confidence_caps_at_95(self, now):
        logs = [hours_ago(now, 20, pre_fatigue=3, post_recovery=8)]
        assert agent().analyze_and_decide(logs, now).confidence == 95

    def test_recommendation_needs_five_logs(self, now):
        logs = [minutes_ago(now, 200 + i * 60, type="spa", pre_fatigue=3, post_recovery=9) for i in range(3)]
        logs += [minutes_ago(now, 500 + i * 60, type="sleep", pre_fatigue=3, post_recovery=5) for i in range(2)]
        decision = agent().analyze_and_decide(logs, now)

        assert decision.action == ACTION_REBOOT_NOW
        assert "おすすめ: ♨️ スパ・サウナ（平均回復度: 9.0）" in decision.message

    def test_english_message(self, now):
        logs = [minutes_ago(now, 200, pre_fatigue=3, post_recovery=8)]
        decision = DecisionAgent(lang="en").analyze_and_decide(logs, now)
        assert decision.message.startswith("⚠️ 3h 20m since your last reboot.")


class TestFatiguePattern:
    def test_insufficient_data(self, now):
        recent = [hours_ago(now, 1), hours_ago(now, 2)]
        assert agent().detect_fatigue_pattern(recent) == PATTERN_INSUFFICIENT

    def test_declining(self, now):
        recent = [hours_ago(now, h, post_recovery=r) for h, r in ((1, 3), (2, 5), (3, 7))]
        assert agent().detect_fatigue_pattern(recent) == PATTERN_DECLINING

    def test_chronic(self, now):
        recent = [hours_ago(now, h, pre_fatigue=8, post_recovery=5) for h in (1, 2, 3)]
        assert agent().detect_fatigue_pattern(recent) == PATTERN_CHRONIC

    def test_normal(self, now):
        recent = [hours_ago(now, h, pre_fatigue=4, post_recovery=6) for h in (1, 2, 3)]
        assert agent().detect_fatigue_pattern(recent) == PATTERN_NORMAL


class TestRuleOrder:
    def test_declining_with_low_weekly_recovery_changes_method(self, now):
        logs = [
            minutes_ago(now, 30, pre_fatigue=3, post_recovery=3),
            minutes_ago(now, 90, pre_fatigue=3, post_recovery=5),
            minutes_ago(now, 150, pre_fatigue=3, post_recovery=7),
        ]
        logs += [hours_ago(now, 48 + i, pre_fatigue=3, post_recovery=1) for i in range(6)]
        decision = agent().analyze_and_decide(logs, now)

        assert decision.analysis["fatigue_pattern"] == PATTERN_DECLINING
        assert decision.analysis["avg_recovery"] < 4
        assert decision.should_alert is True
        assert decision.action == ACTION_CHANGE_METHOD
        assert decision.confidence == 75

    def test_chronic_overwrites_overdue(self, now):
        logs = [hours_ago(now, h, pre_fatigue=9, post_recovery=5) for h in (4, 5, 6)]
        decision = agent().analyze_and_decide(logs, now)

        assert decision.analysis["time_since_last_reboot"] > 180
        assert decision.action == ACTION_TAKE_BREAK
        assert decision.confidence == 85
        assert "慢性的な疲労" in decision.message
        assert "経過" not in decision.message

    def test_estimated_fatigue_reboot_soon(self, now):
        # baseline 8 - (6 - 8) = 10, clamped to 10
        logs = [minutes_ago(now, 30, pre_fatigue=8, post_recovery=6)]
        decision = agent().analyze_and_decide(logs, now)

        assert decision.action == ACTION_REBOOT_SOON
        assert decision.confidence == 65
        assert "10.0/10" in decision.message

    def test_estimated_fatigue_does_not_override_earlier_alert(self, now):
        logs = [minutes_ago(now, 200, pre_fatigue=8, post_recovery=6)]
        decision = agent().analyze_and_decide(logs, now)
        assert decision.action == ACTION_REBOOT_NOW

    def test_rested_user_gets_no_alert(self, now):
        logs = [minutes_ago(now, 30, pre_fatigue=5, post_recovery=9)]
        decision = agent().analyze_and_decide(logs, now)
        assert decision.should_alert is False
        assert decision.action == ACTION_NONE
        assert decision.confidence == 0

    def test_thresholds_are_configurable(self, now):
        logs = [minutes_ago(now, 100, pre_fatigue=3, post_recovery=8)]
        assert agent(optimal_reboot_interval=60).analyze_and_decide(logs, now).action == ACTION_REBOOT_NOW
        assert agent().analyze_and_decide(logs, now).should_alert is False


class TestEstimatedFatigue:
    def test_accumulates_half_point_per_hour(self, now):
        log = hours_ago(now, 2, pre_fatigue=5, post_recovery=6)
        assert DecisionAgent.estimate_current_fatigue(log, 120) == 5.0

    def test_clamped_to_one(self, now):
        log = hours_ago(now, 0, pre_fatigue=1, post_recovery=10)
        assert DecisionAgent.estimate_current_fatigue(log, 0) == 1


def test_status_label():
    assert status_label(85) == "AI高精度監視中"
    assert status_label(65) == "AI監視中"
    assert status_label(0) == "AIスタンバイ"

"""Message catalogue for insights, alerts and chat renders."""
from __future__ import annotations

DEFAULT_LANG = "ja"

TYPE_EMOJI = {
    "spa": "♨️",
    "sleep": "😴",
    "cycling": "🚴",
    "meditation": "🧘",
}
UNKNOWN_TYPE_EMOJI = "🔄"

T = {
    "ja": {
        "type.spa": "スパ・サウナ",
        "type.sleep": "仮眠",
        "type.cycling": "サイクリング",
        "type.meditation": "瞑想",

        "insight.empty": "データを記録するとインサイトが表示されます",
        "insight.best_type": "あなたに最も効果的なのは{label}です",
        "insight.low_frequency": "今週のリブート回数は{count}回。理想は週7回以上です",
        "insight.good_frequency": "素晴らしい！今週は{count}回のリブートを実施",
        "insight.declining": "リブートの効果が低下しています。方法を見直しましょう",
        "insight.optimized": "平均回復度{avg}点！最適化が成功しています",
        "insight.streak": "{days}日連続記録中！習慣化できています",
        "insight.peak_hour": "最もリブートが多いのは{period}{hour}時台です",
        "period.morning": "午前",
        "period.afternoon": "午後",
        "period.evening": "夜",

        "alert.overdue": "⚠️ 前回のリブートから{hours}時間{minutes}分が経過しています。",
        "alert.recommend": "\n💡 おすすめ: {emoji} {name}（平均回復度: {avg}）",
        "alert.chronic": "🚨 慢性的な疲労パターンを検知しました。本格的な休息が必要です。",
        "alert.change_method": "📉 リブート効果が低下しています。別のリブート手法を試してみましょう。",
        "alert.reboot_soon": "💭 現在の推定疲労度: {fatigue}/10\nそろそろリブートのタイミングです。",

        "status.high": "AI高精度監視中",
        "status.active": "AI監視中",
        "status.standby": "AIスタンバイ",

        "ui.saved": "ログを保存しました",
        "ui.deleted": "ログを削除しました",
        "ui.exported": "データをエクスポートしました",
        "ui.save_failed": "保存に失敗しました",
        "ui.delete_failed": "削除に失敗しました",
        "ui.export_failed": "エクスポートに失敗しました",
        "ui.load_failed": "データの読み込みに失敗しました",
        "ui.init_failed": "システム初期化に失敗しました",
        "ui.type_required": "リブート種類を選択してください",
        "ui.invalid_input": "入力内容を確認してください: {field}",

        "logs.title": "📝 リブートログ",
        "logs.empty": "🌱 まだログがありません\n最初のリブートを記録して、自己最適化を始めましょう",
        "logs.minutes": "{minutes}分",
        "stats.title": "📊 統計",
        "stats.total": "総リブート回数: {value}",
        "stats.avg": "平均回復度: {value}",
        "stats.best": "ベストリブート: {value}",
        "stats.streak": "連続記録: {value}日",
        "insights.title": "💡 インサイト",
        "health.title": "🩺 現在のコンディション",
        "health.score": "スコア: {value}",
        "health.focus": "集中力: {value}",
        "health.fatigue": "疲労度: {value}",
        "health.recovery": "回復度: {value}",

        "bot.welcome": "🚀 リブートダッシュボードへようこそ！\n/log 記録  /logs 一覧  /stats 統計  /export エクスポート",
        "bot.ask_type": "リブートの種類は？",
        "bot.ask_duration": "何分間でしたか？（数字で入力も可）",
        "bot.ask_fatigue": "リブート前の疲労度（1〜10）",
        "bot.ask_recovery": "リブート後の回復度（1〜10）",
        "bot.ask_notes": "メモがあれば入力してください",
        "bot.skip": "スキップ",
        "bot.dismiss": "閉じる",
        "bot.delete": "🗑️ 削除",
        "bot.invalid_number": "数字で入力してください",
        "bot.flow_expired": "この入力は終了しています。/log からやり直してください",
    },
    "en": {
        "type.spa": "Spa / sauna",
        "type.sleep": "Nap",
        "type.cycling": "Cycling",
        "type.meditation": "Meditation",

        "insight.empty": "Record some reboots to see insights here",
        "insight.best_type": "Your most effective reboot is {label}",
        "insight.low_frequency": "{count} reboots this week. The target is 7 or more per week",
        "insight.good_frequency": "Great! {count} reboots this week",
        "insight.declining": "Your reboots are losing effect. Time to review your approach",
        "insight.optimized": "Average recovery {avg}! Your optimization is working",
        "insight.streak": "{days}-day logging streak! The habit is forming",
        "insight.peak_hour": "You reboot most often in the {period} around {hour}:00",
        "period.morning": "morning",
        "period.afternoon": "afternoon",
        "period.evening": "evening",

        "alert.overdue": "⚠️ {hours}h {minutes}m since your last reboot.",
        "alert.recommend": "\n💡 Try: {emoji} {name} (avg recovery: {avg})",
        "alert.chronic": "🚨 Chronic fatigue pattern detected. You need a proper rest.",
        "alert.change_method": "📉 Your reboots are losing effect. Try a different method.",
        "alert.reboot_soon": "💭 Estimated fatigue: {fatigue}/10\nA reboot is due soon.",

        "status.high": "AI monitoring (high confidence)",
        "status.active": "AI monitoring",
        "status.standby": "AI standby",

        "ui.saved": "Log saved",
        "ui.deleted": "Log deleted",
        "ui.exported": "Data exported",
        "ui.save_failed": "Failed to save",
        "ui.delete_failed": "Failed to delete",
        "ui.export_failed": "Export failed",
        "ui.load_failed": "Failed to load data",
        "ui.init_failed": "System initialization failed",
        "ui.type_required": "Please choose a reboot type",
        "ui.invalid_input": "Please check your input: {field}",

        "logs.title": "📝 Reboot log",
        "logs.empty": "🌱 No logs yet\nRecord your first reboot to start optimizing",
        "logs.minutes": "{minutes} min",
        "stats.title": "📊 Stats",
        "stats.total": "Total reboots: {value}",
        "stats.avg": "Average recovery: {value}",
        "stats.best": "Best reboot: {value}",
        "stats.streak": "Streak: {value} days",
        "insights.title": "💡 Insights",
        "health.title": "🩺 Current condition",
        "health.score": "Score: {value}",
        "health.focus": "Focus: {value}",
        "health.fatigue": "Fatigue: {value}",
        "health.recovery": "Recovery: {value}",

        "bot.welcome": "🚀 Welcome to the reboot dashboard!\n/log record  /logs list  /stats stats  /export export",
        "bot.ask_type": "Which kind of reboot?",
        "bot.ask_duration": "How many minutes? (you can also type a number)",
        "bot.ask_fatigue": "Fatigue before the reboot (1-10)",
        "bot.ask_recovery": "Recovery after the reboot (1-10)",
        "bot.ask_notes": "Any notes?",
        "bot.skip": "Skip",
        "bot.dismiss": "Dismiss",
        "bot.delete": "🗑️ Delete",
        "bot.invalid_number": "Please send a number",
        "bot.flow_expired": "This entry has ended. Start again with /log",
    },
}


def t(lang: str, key: str, **kwargs) -> str:
    """Translate key; falls back to the default language, then to the key itself."""
    table = T.get(lang) or T[DEFAULT_LANG]
    text = table.get(key) or T[DEFAULT_LANG].get(key) or key
    return text.format(**kwargs) if kwargs else text


def type_emoji(kind: str) -> str:
    return TYPE_EMOJI.get(kind, UNKNOWN_TYPE_EMOJI)


def type_name(lang: str, kind: str) -> str:
    key = f"type.{kind}"
    name = t(lang, key)
    return kind if name == key else name


def type_label(lang: str, kind: str) -> str:
    return f"{type_emoji(kind)}{type_name(lang, kind)}"

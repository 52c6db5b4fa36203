from dotenv import load_dotenv
import os

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


TOKEN = os.getenv("BOT_TOKEN")
CHAT_ID = os.getenv("CHAT_ID")
DB_URL = os.getenv("DB_URL", "sqlite:///reboot.db")
LANGUAGE = os.getenv("REBOOT_LANGUAGE", "ja")
TIMEZONE = os.getenv("TIMEZONE")  # None -> tzlocal
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DECISION_INTERVAL_MINUTES = _int_env("DECISION_INTERVAL_MINUTES", 5)
DECISION_INITIAL_DELAY_SECONDS = _int_env("DECISION_INITIAL_DELAY_SECONDS", 3)

FATIGUE_THRESHOLD = _int_env("FATIGUE_THRESHOLD", 7)
OPTIMAL_REBOOT_INTERVAL = _int_env("OPTIMAL_REBOOT_INTERVAL", 180)  # minutes
LOW_RECOVERY_THRESHOLD = _int_env("LOW_RECOVERY_THRESHOLD", 4)

CACHE_MAX_AGE_SECONDS = _int_env("CACHE_MAX_AGE_SECONDS", 3600)
WEB_PORT = _int_env("WEB_PORT", 5000)

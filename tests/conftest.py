"""
Shared fixtures: file-backed SQLite stores and log factories.
"""

from datetime import datetime, timedelta

import pytest

from reboot.database import make_engine, make_session_factory
from reboot.models.log_entry import LogEntry
from reboot.services.clock import HOUR_MS, MINUTE_MS, iso_date, local_tz, now_ms, to_ms
from reboot.services.store import LogStore


@pytest.fixture
def tz():
    return local_tz()


@pytest.fixture
def store(tmp_path, tz):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    s = LogStore(engine, make_session_factory(engine), tz=tz)
    s.init()
    yield s
    engine.dispose()


@pytest.fixture
def now():
    return now_ms()


_ids = iter(range(1, 10**9))


def make_log(timestamp, post_recovery=5, pre_fatigue=5, type="spa", duration=30, notes=None, tz=None):
    """Transient LogEntry; analytics and the agent never need a session."""
    return LogEntry(
        id=next(_ids),
        timestamp=timestamp,
        date=iso_date(timestamp, tz or local_tz()),
        duration_minutes=duration,
        type=type,
        pre_fatigue=pre_fatigue,
        post_recovery=post_recovery,
        notes=notes,
        created_at=timestamp,
    )


def minutes_ago(now, minutes, **kwargs):
    return make_log(now - int(minutes * MINUTE_MS), **kwargs)


def hours_ago(now, hours, **kwargs):
    return make_log(now - int(hours * HOUR_MS), **kwargs)


def local_noon(days_ago, tz=None):
    """Epoch ms of local noon `days_ago` calendar days before today."""
    tz = tz or local_tz()
    day = datetime.now(tz).date() - timedelta(days=days_ago)
    return to_ms(datetime(day.year, day.month, day.day, 12, 0), tz)


def draft_payload(**overrides):
    payload = {
        "timestamp": "2026-10-19T08:30",
        "duration": 30,
        "type": "spa",
        "preFatigue": 7,
        "postRecovery": 8,
        "notes": "",
    }
    payload.update(overrides)
    return payload

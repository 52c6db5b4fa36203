from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Any, List, Optional, Union

from sqlalchemy import func, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from reboot.database import Base
from reboot.errors import StorageReadError, StorageUnavailable, StorageWriteError
from reboot.models.cache_entry import CacheEntry
from reboot.models.log_entry import LogEntry
from reboot.services.clock import iso_date, local_tz, now_ms, parse_local_datetime, to_ms
from reboot.services.validation import LogDraft

logger = logging.getLogger(__name__)

DEFAULT_CACHE_MAX_AGE_MS = 60 * 60 * 1000

TimeBound = Union[int, datetime]


class LogStore:
    """Persistent, indexed store of LogEntry records.

    Sole owner of log entries: callers get detached instances back and never
    mutate them. init() must run once before any other operation.
    """

    def __init__(self, engine: Engine, session_factory: sessionmaker, tz: Optional[tzinfo] = None):
        self._engine = engine
        self._session_factory = session_factory
        self._tz = tz
        self._ready = False
        self._last_id = 0

    @property
    def tz(self) -> tzinfo:
        return self._tz or local_tz()

    def init(self) -> None:
        """Create the logs/ai_cache tables and their indexes. Safe to call again."""
        if self._ready:
            return
        try:
            Base.metadata.create_all(bind=self._engine, tables=[LogEntry.__table__, CacheEntry.__table__])
            with self._session_factory() as session:
                session.execute(text("SELECT 1"))
                self._last_id = session.query(func.max(LogEntry.id)).scalar() or 0
        except SQLAlchemyError as exc:
            logger.error("Cannot open log store at %s: %s", self._engine.url, exc)
            raise StorageUnavailable(f"cannot open log store: {exc}") from exc
        self._ready = True
        logger.info("Log store ready at %s", self._engine.url)

    def _require_ready(self) -> None:
        if not self._ready:
            raise StorageUnavailable("log store used before init()")

    def _next_id(self) -> int:
        # Clock-derived, but strictly increasing even if the clock stalls or steps back.
        candidate = now_ms()
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def save_log(self, draft: LogDraft) -> LogEntry:
        """Persist a draft and return the stored entry (all-or-nothing)."""
        self._require_ready()
        timestamp = parse_local_datetime(draft.timestamp, self.tz)
        entry = LogEntry(
            id=self._next_id(),
            timestamp=timestamp,
            date=iso_date(timestamp, self.tz),
            duration_minutes=draft.duration_minutes,
            type=draft.type,
            pre_fatigue=draft.pre_fatigue,
            post_recovery=draft.post_recovery,
            notes=draft.notes,
            created_at=now_ms(),
        )
        try:
            with self._session_factory() as session:
                session.add(entry)
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to save log id=%s: %s", entry.id, exc)
            raise StorageWriteError(f"failed to save log: {exc}") from exc
        logger.info("Saved log id=%s type=%s date=%s", entry.id, entry.type, entry.date)
        return entry

    def get_all_logs(self) -> List[LogEntry]:
        """All entries, newest timestamp first; equal timestamps in insertion order."""
        self._require_ready()
        try:
            with self._session_factory() as session:
                return (
                    session.query(LogEntry)
                    .order_by(LogEntry.timestamp.desc(), LogEntry.id.asc())
                    .all()
                )
        except SQLAlchemyError as exc:
            logger.error("Failed to read logs: %s", exc)
            raise StorageReadError(f"failed to read logs: {exc}") from exc

    def get_logs_by_date_range(self, start: TimeBound, end: TimeBound) -> List[LogEntry]:
        """Entries with start <= timestamp <= end, newest first."""
        self._require_ready()
        start_ms = start if isinstance(start, int) else to_ms(start, self.tz)
        end_ms = end if isinstance(end, int) else to_ms(end, self.tz)
        try:
            with self._session_factory() as session:
                return (
                    session.query(LogEntry)
                    .filter(LogEntry.timestamp >= start_ms, LogEntry.timestamp <= end_ms)
                    .order_by(LogEntry.timestamp.desc(), LogEntry.id.asc())
                    .all()
                )
        except SQLAlchemyError as exc:
            logger.error("Failed to read logs in range %s..%s: %s", start_ms, end_ms, exc)
            raise StorageReadError(f"failed to read logs: {exc}") from exc

    def delete_log(self, log_id: int) -> None:
        """Delete by id. An unknown id is not an error."""
        self._require_ready()
        try:
            with self._session_factory() as session:
                deleted = session.query(LogEntry).filter(LogEntry.id == log_id).delete()
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to delete log id=%s: %s", log_id, exc)
            raise StorageWriteError(f"failed to delete log: {exc}") from exc
        if deleted:
            logger.info("Deleted log id=%s", log_id)

    def count(self) -> int:
        self._require_ready()
        try:
            with self._session_factory() as session:
                return session.query(func.count(LogEntry.id)).scalar() or 0
        except SQLAlchemyError as exc:
            raise StorageReadError(f"failed to count logs: {exc}") from exc

    def save_cache(self, key: str, data: Any) -> None:
        self._require_ready()
        try:
            with self._session_factory() as session:
                session.merge(CacheEntry(key=key, data=data, timestamp=now_ms()))
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to write cache key=%s: %s", key, exc)
            raise StorageWriteError(f"failed to write cache: {exc}") from exc

    def get_cache(self, key: str, max_age_ms: int = DEFAULT_CACHE_MAX_AGE_MS) -> Optional[Any]:
        """Cached data for key, or None when absent or older than max_age_ms."""
        self._require_ready()
        try:
            with self._session_factory() as session:
                cached = session.get(CacheEntry, key)
        except SQLAlchemyError as exc:
            logger.error("Failed to read cache key=%s: %s", key, exc)
            raise StorageReadError(f"failed to read cache: {exc}") from exc
        if cached is None or now_ms() - cached.timestamp > max_age_ms:
            return None
        return cached.data

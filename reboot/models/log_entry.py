from __future__ import annotations

from sqlalchemy import BigInteger, Column, Integer, String, Text

from reboot.database import Base


class LogEntry(Base):
    """One recorded recovery activity. Immutable once stored; only deleted."""
    __tablename__ = "logs"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    timestamp = Column(BigInteger, nullable=False, index=True)  # epoch ms, activity start
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD of timestamp
    duration_minutes = Column(Integer, nullable=False, default=0)
    type = Column(String(32), nullable=False, index=True)  # spa, sleep, cycling, meditation, ...
    pre_fatigue = Column(Integer, nullable=False)  # 1-10
    post_recovery = Column(Integer, nullable=False)  # 1-10
    notes = Column(Text, nullable=True)
    created_at = Column(BigInteger, nullable=False)  # epoch ms, persistence time

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "date": self.date,
            "durationMinutes": self.duration_minutes,
            "type": self.type,
            "preFatigue": self.pre_fatigue,
            "postRecovery": self.post_recovery,
            "notes": self.notes,
            "createdAt": self.created_at,
        }

    def __repr__(self) -> str:
        return f"<LogEntry id={self.id} type={self.type} date={self.date}>"

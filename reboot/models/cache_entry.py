from sqlalchemy import BigInteger, Column, JSON, String

from reboot.database import Base


class CacheEntry(Base):
    __tablename__ = "ai_cache"

    key = Column(String(64), primary_key=True)
    data = Column(JSON, nullable=True)
    timestamp = Column(BigInteger, nullable=False, index=True)  # epoch ms of the write

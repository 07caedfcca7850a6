import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from realty_demo.db import Base


class DemoSnapshot(Base):
    """Persisted sample-mode state, one row per storage key."""

    __tablename__ = "demo_snapshots"

    key: str = Column(String(128), primary_key=True)
    version: int = Column(Integer, nullable=False)
    payload: str = Column(Text, nullable=False)
    updated_at: datetime.datetime = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

"""
SQLAlchemy ORM models for persistent storage.

The daily challenge only needs a key-value blob store, so a single table
holds JSON blobs addressed by string keys ("subs:<date>", "meta:<date>").
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class BlobDB(Base):
    """
    A JSON blob stored under a string key.

    The version column increments on every write and backs compare-and-swap
    updates.
    """

    __tablename__ = "blobs"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON)
    version: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<BlobDB(key={self.key}, version={self.version})>"

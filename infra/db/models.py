# infra/db/models.py
from __future__ import annotations
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StorageItemORM(Base):
    __tablename__ = "storage_items"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now
    )

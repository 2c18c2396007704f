"""SQLAlchemy model backing the keyed pipeline state store."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB

from .base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PipelineState(Base):
    """One write-once cell of pipeline output, keyed by (namespace, request id)."""

    __tablename__ = "pipeline_states"

    namespace = Column(String(32), primary_key=True)
    request_id = Column(String(64), primary_key=True)
    value = Column(JSONB, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )


__all__ = ["PipelineState"]

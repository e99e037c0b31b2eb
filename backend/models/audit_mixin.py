from sqlalchemy import Column, DateTime
from datetime import datetime
import pytz


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


class TimestampMixin:
    """Mixin that provides created/updated timestamps.

    Timestamps are timezone-aware and always written in UTC. Models that also
    need to know *who* made a change (journal entries) declare their own user
    reference columns next to these.
    """
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

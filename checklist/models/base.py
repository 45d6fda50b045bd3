from __future__ import annotations

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

# Fixed width, so string order == chronological order (recurrence query sorts on it).
ISO_LOCAL_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


class IsoDateTime(TypeDecorator):
    """Local date-time stored as an ISO-8601 string (2024-05-01T08:30:00.000000)."""

    impl = String(26)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> str | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value.strftime(ISO_LOCAL_FORMAT)

    def process_result_value(self, value: str | None, dialect) -> datetime | None:
        if value is None:
            return None
        return datetime.fromisoformat(value)


class Base(DeclarativeBase):
    pass

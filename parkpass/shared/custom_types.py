import datetime
from typing import Optional

from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy.dialects.sqlite import DATETIME as SQLITE_DATETIME


def as_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Return ``value`` as an aware UTC datetime. Naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timestamps stored in UTC.

    SQLite has no timezone support, so values are written there as naive UTC and
    given back their tzinfo on load. Other backends get ``TIMESTAMP WITH TIME ZONE``.
    """
    impl = DateTime
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(SQLITE_DATETIME())
        return dialect.type_descriptor(DateTime(timezone=True))

    def process_bind_param(self, value, dialect):
        value = as_utc(value)
        if value is None or dialect.name != "sqlite":
            return value
        return value.replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        return as_utc(value)

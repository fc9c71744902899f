"""
Column types shared by the tables
"""

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from careshift.core.timeutils import as_utc


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC timestamp

    SQLite keeps no offset, so values are normalized to UTC on the way in and
    tagged as UTC on the way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)

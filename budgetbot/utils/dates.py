"""
Timezone helpers.

Timestamps are stored as wall-clock time of the configured timezone so that
month boundaries match what the user sees.
"""
from datetime import datetime, tzinfo


def to_local(moment: datetime, tz: tzinfo) -> datetime:
    """Attach tz to naive datetimes, convert aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def now_local(tz: tzinfo) -> datetime:
    return datetime.now(tz)

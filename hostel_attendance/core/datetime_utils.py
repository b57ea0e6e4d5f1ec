from datetime import datetime, timezone

from sqlalchemy import DateTime

# Column type for every timestamp; values are always timezone-aware UTC
UTCDateTime = DateTime(timezone=True)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)

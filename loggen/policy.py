"""
Time and retention rules for posts.

Everything here is a pure function of the timestamps it is given, so the
request handlers, the sweep and the tests all agree on what "old" means.
All datetimes are naive UTC, matching what the database stores.
"""

from datetime import date, datetime, timedelta, timezone

ARCHIVE_AFTER_DAYS = 30


def utcnow_naive() -> datetime:
    """Return current UTC time as a naive datetime (no tzinfo)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Normalize any datetime to naive UTC for consistent DB storage."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def days_since(then: datetime, now: datetime | None = None) -> float:
    if now is None:
        now = utcnow_naive()
    return (now - then).total_seconds() / 86400.0


def archive_reference(created_at: datetime, unpinned_at: datetime | None) -> datetime:
    """The countdown starts at the last unpin, or at creation if never unpinned."""
    return unpinned_at if unpinned_at is not None else created_at


def archive_cutoff(now: datetime | None = None, days: int = ARCHIVE_AFTER_DAYS) -> datetime:
    """Reference timestamps at or before this instant are due for archival."""
    if now is None:
        now = utcnow_naive()
    return now - timedelta(days=days)


def is_archive_eligible(
    created_at: datetime,
    unpinned_at: datetime | None,
    pinned: bool,
    archived: bool,
    now: datetime | None = None,
    days: int = ARCHIVE_AFTER_DAYS,
) -> bool:
    if pinned or archived:
        return False
    ref = archive_reference(created_at, unpinned_at)
    return ref <= archive_cutoff(now, days)


def is_old_post(created_at: datetime, now: datetime | None = None, days: int = ARCHIVE_AFTER_DAYS) -> bool:
    """True when the post itself (not its last unpin) is past the retention window."""
    return created_at <= archive_cutoff(now, days)


def has_occurred(scheduled_at: datetime, now: datetime | None = None) -> bool:
    if now is None:
        now = utcnow_naive()
    return scheduled_at < now


def is_christmas(day: date | None = None) -> bool:
    """Seasonal theme switch: December 1st through 26th."""
    if day is None:
        day = utcnow_naive().date()
    return day.month == 12 and day.day <= 26

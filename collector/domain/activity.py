"""Commit activity derived from the fetched commit history window."""
from datetime import datetime, timedelta, timezone
from typing import Sequence

from dateutil.relativedelta import relativedelta


GIT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_git_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp into an aware UTC datetime."""
    return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def format_git_timestamp(moment: datetime) -> str:
    """Format a datetime as a GitTimestamp string (UTC, `Z` suffix)."""
    return _as_utc(moment).strftime(GIT_TIMESTAMP_FORMAT)


def one_month_before(now: datetime) -> datetime:
    """Start of the commit history window: one calendar month before `now`."""
    return _as_utc(now) - relativedelta(months=1)


def commits_count_for_the_last_week(history: Sequence[str], now: datetime) -> int:
    """Count commits committed at or after `now - 7 days`.

    Args:
        history: Commit timestamps as ISO-8601 strings
        now: Reference time; naive values are taken as UTC

    Returns:
        Number of commits within the last week
    """
    a_week_ago = _as_utc(now) - timedelta(days=7)
    return sum(1 for committed in history if parse_git_timestamp(committed) >= a_week_ago)


def commits_count_for_the_last_month(history: Sequence[str]) -> int:
    # The fetch already bounds the window to one month.
    return len(history)

"""Tests for commit activity derivation."""
from datetime import datetime, timedelta, timezone
from collector.domain.activity import (
    commits_count_for_the_last_month,
    commits_count_for_the_last_week,
    format_git_timestamp,
    one_month_before,
    parse_git_timestamp,
)


NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def _days_ago(days, hours=0):
    return format_git_timestamp(NOW - timedelta(days=days, hours=hours))


def test_week_count_includes_only_recent_commits():
    history = [_days_ago(1), _days_ago(6), _days_ago(8), _days_ago(29)]

    assert commits_count_for_the_last_week(history, NOW) == 2


def test_week_count_boundary_is_inclusive():
    history = [_days_ago(7), _days_ago(7, hours=1)]

    assert commits_count_for_the_last_week(history, NOW) == 1


def test_week_count_treats_naive_now_as_utc():
    history = [_days_ago(2)]
    naive_now = NOW.replace(tzinfo=None)

    assert commits_count_for_the_last_week(history, naive_now) == 1


def test_month_count_is_history_length():
    assert commits_count_for_the_last_month([]) == 0
    assert commits_count_for_the_last_month([_days_ago(1), _days_ago(20)]) == 2


def test_week_count_never_exceeds_month_count():
    histories = [
        [],
        [_days_ago(1)],
        [_days_ago(10), _days_ago(20)],
        [_days_ago(0), _days_ago(3), _days_ago(9), _days_ago(27)],
    ]

    for history in histories:
        assert commits_count_for_the_last_week(history, NOW) <= commits_count_for_the_last_month(history)


def test_week_count_is_monotonic_when_recent_commits_are_added():
    history = [_days_ago(3), _days_ago(15)]
    before = commits_count_for_the_last_week(history, NOW)

    after = commits_count_for_the_last_week(history + [_days_ago(0), _days_ago(5)], NOW)

    assert after == before + 2


def test_one_month_before_uses_calendar_months():
    assert one_month_before(NOW) == datetime(2024, 2, 15, 12, 0, 0, tzinfo=timezone.utc)
    assert one_month_before(datetime(2024, 3, 31, tzinfo=timezone.utc)) == datetime(
        2024, 2, 29, tzinfo=timezone.utc
    )


def test_git_timestamp_formatting():
    assert format_git_timestamp(NOW) == "2024-03-15T12:00:00Z"
    assert parse_git_timestamp("2024-03-15T12:00:00Z") == NOW

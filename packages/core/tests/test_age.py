"""Tests for the review age formatter."""

from datetime import datetime, timedelta, timezone

import pytest

from revping_core.age import time_ago

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "seconds,expected",
    [
        (0, "0 min"),
        (59, "0 min"),
        (119, "1 min"),
        (120, "2 mins"),
        (3599, "59 mins"),
        (3600, "1 hr"),
        (7199, "1 hr"),
        (7200, "2 hrs"),
        (86_399, "23 hrs"),
        (86_400, "1 day"),
        (172_799, "1 day"),
        (172_800, "2 days"),
        (10 * 86_400 + 5000, "10 days"),
    ],
)
def test_buckets(seconds, expected):
    assert time_ago(NOW - timedelta(seconds=seconds), now=NOW) == expected


def test_defaults_to_current_time():
    assert time_ago(datetime.now(timezone.utc) - timedelta(hours=3)) == "3 hrs"

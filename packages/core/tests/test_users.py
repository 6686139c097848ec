"""Tests for the user profile cache."""

from unittest.mock import MagicMock

import pytest

from revping_core.users import UserCache


class TestUserCache:
    def test_fetches_once_per_id(self):
        fetch = MagicMock(return_value={"fields": {"username": "alice"}})
        cache = UserCache(fetch)

        assert cache.get_or_fetch("PHID-USER-a") == {"fields": {"username": "alice"}}
        assert cache.get_or_fetch("PHID-USER-a") == {"fields": {"username": "alice"}}

        fetch.assert_called_once_with("PHID-USER-a")
        assert "PHID-USER-a" in cache
        assert len(cache) == 1

    def test_distinct_ids_fetched_separately(self):
        fetch = MagicMock(side_effect=lambda phid: {"phid": phid})
        cache = UserCache(fetch)
        cache.get_or_fetch("a")
        cache.get_or_fetch("b")
        assert fetch.call_count == 2

    def test_empty_id_not_fetched(self):
        fetch = MagicMock()
        assert UserCache(fetch).get_or_fetch("") == {}
        fetch.assert_not_called()

    def test_failures_not_cached(self):
        fetch = MagicMock(side_effect=[RuntimeError("down"), {"phid": "a"}])
        cache = UserCache(fetch)
        with pytest.raises(RuntimeError):
            cache.get_or_fetch("a")
        assert "a" not in cache
        assert cache.get_or_fetch("a") == {"phid": "a"}

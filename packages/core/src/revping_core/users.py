"""Process-wide cache of user profiles keyed by PHID."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class UserCache:
    """Memoize ``fetch(user_id)``.

    PHID-to-profile is treated as immutable, so entries are never evicted and
    the cache grows for the lifetime of the process. The scan driver creates
    one instance and reuses it across cycles. Failed fetches are not cached;
    the exception propagates and the next lookup tries again.
    """

    def __init__(self, fetch: Callable[[str], dict]):
        self._fetch = fetch
        self._profiles: dict[str, dict] = {}

    def get_or_fetch(self, user_id: str) -> dict:
        if not user_id:
            return {}
        profile = self._profiles.get(user_id)
        if profile is None:
            logger.debug("Resolving user %s", user_id)
            profile = self._fetch(user_id)
            self._profiles[user_id] = profile
        return profile

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._profiles

"""Posting reminders to Slack through an incoming webhook."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import requests

logger = logging.getLogger(__name__)

MAX_POST_CHARS = 3000
POST_PAUSE_SECONDS = 1.0

_TRUNCATION_MARK = "…"


def split_posts(messages: list[str], limit: int = MAX_POST_CHARS, header: str = "") -> list[str]:
    """Pack ``messages`` into as few posts as possible, each at most ``limit`` chars.

    A post is ``header`` followed by its messages, every message on its own
    line. Messages are never split across posts and keep their order. A
    single message too long to fit even on its own is truncated.
    """
    posts: list[str] = []
    current = header
    count = 0
    for message in messages:
        line = "\n" + message if current else message
        if count and len(current) + len(line) > limit:
            posts.append(current)
            current, count = header, 0
            line = "\n" + message if current else message
        if len(current) + len(line) > limit:
            room = limit - len(current) - len(_TRUNCATION_MARK)
            line = line[: max(room, 0)] + _TRUNCATION_MARK
            logger.warning("Truncated a %d-char message to fit one post", len(message))
        current += line
        count += 1
    if count:
        posts.append(current)
    return posts


class SlackPoster:
    def __init__(
        self,
        hook: str,
        username: str = "OhMyCodeReview",
        icon_emoji: str = ":face_with_monocle:",
        timeout: float = 30,
        session=None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._hook = hook
        self._username = username
        self._icon_emoji = icon_emoji
        self._timeout = timeout
        self._session = session or requests.Session()
        self._sleep = sleep

    def post(self, channel: str, text: str) -> bool:
        """Send one message. Returns False (and logs) instead of raising."""
        payload = {
            "channel": channel,
            "username": self._username,
            "icon_emoji": self._icon_emoji,
            "text": text,
        }
        try:
            resp = self._session.post(self._hook, json=payload, timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Slack post to %s failed (%s): %s", channel, type(e).__name__, e)
            return False
        return True

    def post_all(self, channel: str, posts: list[str]) -> int:
        """Send ``posts`` in order with a short pause after each; returns how many went through."""
        sent = 0
        for text in posts:
            if self.post(channel, text):
                sent += 1
            self._sleep(POST_PAUSE_SECONDS)
        return sent

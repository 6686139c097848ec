"""Review reminder scan: find open revisions, pick reviewers, post to Slack."""

from __future__ import annotations

import logging
import os
import random
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial

from rich.console import Console

from revping_core.age import time_ago
from revping_core.blame import git_blame
from revping_core.config import load_config
from revping_core.credit import BlameFn, collect_credit
from revping_core.models import ChangeRecord
from revping_core.phab.conduit import ConduitClient, ConduitError
from revping_core.phab.revisions import build_change, fetch_user, search_revisions
from revping_core.selection import select_reviewer
from revping_core.slack import SlackPoster, split_posts
from revping_core.users import UserCache

console = Console()
logger = logging.getLogger(__name__)

REVIEW_HEADER = ":hourglass: *Code Review:*"

# Characters that would break Slack's <url|label> link syntax.
_TITLE_STRIP_RE = re.compile(r"[<>\"'\\/]")


@dataclass
class CycleResult:
    """Outcome of one scan cycle. ``error`` is set when the cycle aborted."""

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    groups_scanned: int = 0
    reminders: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def compose_reminder(change: ChangeRecord, reviewer: str | None, diff_url: str, now: datetime | None = None) -> str:
    title = _TITLE_STRIP_RE.sub("", change.title)
    msg = f"*{change.author_name}* <{diff_url}{change.id}|{title}> "
    if reviewer:
        msg += f"\n    Ping *{reviewer}* "
    msg += f"(_{time_ago(change.last_modified, now)}_)"
    return msg


def scan_group(
    client: ConduitClient,
    config: dict,
    group: dict,
    users: UserCache,
    poster: SlackPoster,
    rng: random.Random,
    blame: BlameFn = git_blame,
) -> int:
    """Post reminders for one {query, channel} group. Returns the reminder count."""
    channel = group["channel"]
    try:
        revisions = search_revisions(client, group["query"])
    except ConduitError as e:
        logger.warning("Revision search for %s failed, skipping group: %s", channel, e)
        return 0

    # First pass: resolve every revision so all authors in the batch are known
    # before anyone is picked as a random fallback reviewer.
    changes: list[ChangeRecord] = []
    for revision in revisions:
        try:
            changes.append(build_change(client, revision, users))
        except (ConduitError, KeyError, TypeError) as e:
            logger.warning("Skipping revision %s: %s", revision.get("id", "?"), e)
    participants = [c.author_name for c in changes if c.author_name]

    repo = config.get("repo") or os.getcwd()
    messages = []
    for change in changes:
        load_credit = partial(collect_credit, repo, change.touched_paths, config["sample_size"], rng, blame)
        reviewer = select_reviewer(change, participants, load_credit, rng)
        logger.info("D%s by %s: ping %s", change.id, change.author_name, reviewer or "nobody")
        messages.append(compose_reminder(change, reviewer, config.get("diff_url", "")))

    if not revisions:
        empty = config.get("empty_messages") or []
        text = REVIEW_HEADER + ("\n" + rng.choice(empty) if empty else "")
        poster.post(channel, text)
        return 0
    if not messages:
        logger.warning("None of %d revision(s) for %s could be resolved, not posting", len(revisions), channel)
        return 0

    posts = split_posts(messages, header=REVIEW_HEADER)
    sent = poster.post_all(channel, posts)
    console.print(f"  {channel}: {len(messages)} reminder(s) in {sent}/{len(posts)} post(s).")
    return len(messages)


def _default_client(config: dict) -> ConduitClient:
    return ConduitClient(config["conduit_url"], config.get("conduit_token"), timeout=config["timeout"])


def _default_poster(config: dict) -> SlackPoster:
    return SlackPoster(
        config["slack_hook"],
        username=config["username"],
        icon_emoji=config["icon_emoji"],
        timeout=config["timeout"],
    )


class ReviewScanner:
    """Runs scan cycles against a config file until the process is stopped.

    The config is re-read every cycle so edits apply without a restart. The
    user cache is the only state that outlives a cycle.
    """

    def __init__(
        self,
        config_path: str,
        rng: random.Random | None = None,
        blame: BlameFn = git_blame,
        client_factory: Callable[[dict], ConduitClient] = _default_client,
        poster_factory: Callable[[dict], SlackPoster] = _default_poster,
        interval: float = 1740,
    ):
        self.config_path = config_path
        self.interval = interval
        self.users = UserCache(self._fetch_user)
        self._rng = rng or random.Random()
        self._blame = blame
        self._client_factory = client_factory
        self._poster_factory = poster_factory
        self._client: ConduitClient | None = None

    def _fetch_user(self, phid: str) -> dict:
        if self._client is None:
            raise RuntimeError("user lookup outside of a scan cycle")
        return fetch_user(self._client, phid)

    def run_cycle(self) -> CycleResult:
        result = CycleResult()
        try:
            config = load_config(self.config_path)
            self.interval = config["interval"]
            self._client = self._client_factory(config)
            poster = self._poster_factory(config)
            console.print(f"[bold]Scanning {len(config['groups'])} group(s)...[/bold]")
            for group in config["groups"]:
                result.reminders += scan_group(self._client, config, group, self.users, poster, self._rng, self._blame)
                result.groups_scanned += 1
        except Exception as e:
            result.error = e
        return result

    def run_forever(self, sleep: Callable[[float], None] = time.sleep, max_cycles: int | None = None) -> None:
        cycles = 0
        while True:
            result = self.run_cycle()
            cycles += 1
            if result.ok:
                console.print(
                    f"[green]Cycle done: {result.reminders} reminder(s) across {result.groups_scanned} group(s).[/green]"
                )
            else:
                logger.error("Scan cycle failed: %s", result.error, exc_info=result.error)
            if max_cycles is not None and cycles >= max_cycles:
                return
            sleep(self.interval)

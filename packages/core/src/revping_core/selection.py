"""Decide whom to ping for a revision.

Order of preference:
  1. Reviewers named on the revision that have not accepted yet (groups such
     as ``#backend`` are skipped, they can't be pinged as a person).
  2. Whoever owns most of the touched lines according to `git blame`.
  3. A random author from the same scan batch.

The top candidate (and the runner-up, if needed) is rejected when its name is
close enough to the revision author's to be the same person under a different
spelling: blame reports the git author name, Phabricator the username.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from revping_core.credit import rank_authors
from revping_core.models import ChangeRecord, CreditTable
from revping_core.names import name_distance

logger = logging.getLogger(__name__)

GROUP_PREFIX = "#"
SELF_MATCH_THRESHOLD = 5

# Number of ranked candidates checked against the author before falling back.
_GUARDED_CANDIDATES = 2


def candidate_reviewers(change: ChangeRecord) -> list[str]:
    """Named reviewers still pending, in the order the revision lists them."""
    accepted = set(change.explicit_reviewed_by)
    return [
        name
        for name in change.explicit_reviewers
        if name and name not in accepted and not name.startswith(GROUP_PREFIX)
    ]


def is_self_match(candidate: str, author: str, threshold: int = SELF_MATCH_THRESHOLD) -> bool:
    return name_distance(candidate, author) <= threshold


def rank_reviewers(change: ChangeRecord, load_credit: Callable[[], CreditTable]) -> list[str]:
    """Explicit reviewers when there are any, otherwise the blame ranking.

    ``load_credit`` is only called on the blame path; explicit reviewers
    never cost a history scan.
    """
    explicit = candidate_reviewers(change)
    if explicit:
        return explicit
    return rank_authors(load_credit())


def pick_reviewer(
    ranking: list[str],
    author: str,
    participants: list[str],
    rng: random.Random | None = None,
) -> str | None:
    for candidate in ranking[:_GUARDED_CANDIDATES]:
        if not is_self_match(candidate, author):
            return candidate
        logger.debug("Dropping %r as a likely alias of author %r", candidate, author)

    others = sorted({p for p in participants if p and p != author})
    if not others:
        return None
    return (rng or random.Random()).choice(others)


def select_reviewer(
    change: ChangeRecord,
    participants: list[str],
    load_credit: Callable[[], CreditTable],
    rng: random.Random | None = None,
) -> str | None:
    """Return the name to ping for ``change``, or None if nobody fits."""
    ranking = rank_reviewers(change, load_credit)
    return pick_reviewer(ranking, change.author_name, participants, rng)

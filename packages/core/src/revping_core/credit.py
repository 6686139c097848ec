"""Combine per-file blame into one credit table for a whole change."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import replace

from revping_core.blame import git_blame
from revping_core.models import CreditTable

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 9

BlameFn = Callable[[str, str], CreditTable]


def merge_credit(tables: Iterable[CreditTable]) -> CreditTable:
    """Sum edit counts and keep the latest edit per author.

    Addition and max are both commutative, so the resulting counts and
    timestamps do not depend on the order the tables arrive in. Only the
    key order (used for ranking ties) follows the input order.
    """
    merged: CreditTable = {}
    for table in tables:
        for name, record in table.items():
            current = merged.get(name)
            if current is None:
                # Copy so merging never mutates the per-file tables.
                merged[name] = replace(record)
            else:
                current.edit_count += record.edit_count
                current.last_edit_at = max(current.last_edit_at, record.last_edit_at)
    return merged


def rank_authors(credit: CreditTable) -> list[str]:
    """Authors by descending edit count; ties keep scan order."""
    return [name for name, _ in sorted(credit.items(), key=lambda item: -item[1].edit_count)]


def sample_paths(paths: list[str], sample_size: int, rng: random.Random | None = None) -> list[str]:
    """Pick up to ``sample_size`` distinct paths uniformly at random."""
    rng = rng or random.Random()
    k = max(0, min(sample_size, len(paths)))
    return rng.sample(paths, k)


def collect_credit(
    repo: str,
    paths: list[str],
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    rng: random.Random | None = None,
    blame: BlameFn = git_blame,
) -> CreditTable:
    """Blame a random sample of ``paths`` and merge the results.

    Sampling bounds the cost of changes that touch hundreds of files: we
    only need a rough idea of who knows this code, not an exact census.
    """
    sampled = sample_paths(paths, sample_size, rng)
    logger.debug("Blaming %d of %d path(s) in %s", len(sampled), len(paths), repo)
    return merge_credit(blame(repo, path) for path in sampled)

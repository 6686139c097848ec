"""Per-file authorship from `git blame`.

Each line of `git blame --date=iso` output looks like::

    3f2a9c1d (Alice Tan 2024-03-01 10:22:41 +0800 12) return x

We only care about the author and the timestamp. Lines that do not match are
skipped, so one odd line (binary garbage, a boundary marker we don't expect)
never throws away the rest of the file.
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Iterable
from datetime import datetime

from revping_core.models import AuthorshipRecord, CreditTable

logger = logging.getLogger(__name__)

_BLAME_LINE_RE = re.compile(r"^.+? +\((.+?) +(\d{4}-\d\d-\d\d \d\d:\d\d:\d\d [-+]\d{4}) +\d+\) .*$")
_BLAME_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

_BLAME_TIMEOUT = 30


def aggregate_blame(lines: Iterable[str]) -> CreditTable:
    """Count attributed lines and the latest edit per author."""
    credit: CreditTable = {}
    for line in lines:
        match = _BLAME_LINE_RE.match(line)
        if match is None:
            logger.debug("Skipping unparseable blame line: %r", line)
            continue
        name = match.group(1)
        try:
            edited_at = datetime.strptime(match.group(2), _BLAME_DATE_FORMAT)
        except ValueError:
            logger.debug("Skipping blame line with bad timestamp: %r", line)
            continue

        record = credit.get(name)
        if record is None:
            credit[name] = AuthorshipRecord(author_name=name, edit_count=1, last_edit_at=edited_at)
        else:
            record.edit_count += 1
            record.last_edit_at = max(record.last_edit_at, edited_at)
    return credit


def git_blame(repo: str, path: str, timeout: float = _BLAME_TIMEOUT) -> CreditTable:
    """Run `git blame` on ``path`` inside ``repo`` and aggregate the result.

    Never raises. A missing checkout, an unknown path, a missing git binary or
    a hung process all mean "no attribution data" and yield an empty table.
    """
    try:
        result = subprocess.run(
            ["git", "-c", "blame.showEmail=false", "blame", "--date=iso", "--", path],
            cwd=repo,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("git blame failed for %s (%s): %s", path, type(e).__name__, e)
        return {}

    if result.returncode != 0:
        logger.debug("git blame exited %d for %s: %s", result.returncode, path, result.stderr.strip())
        return {}
    if not result.stdout:
        return {}
    return aggregate_blame(result.stdout.splitlines())

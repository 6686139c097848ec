"""Parser for Differential commit messages.

A commit message as returned by ``differential.getcommitmessage`` is a title
followed by optional sections, always in this order::

    Fix the frobnicator

    Summary:
    Longer description...

    Reviewers: alice, #backend

    Reviewed By: alice

    Subscribers: bob

    Differential Revision: https://phab.example.com/D123

Any section may be missing. Headers only count at the start of the message
or after a blank line. The trailing sections are generated by Phabricator
while the summary is free text, so headers are matched from the end: a
summary paragraph that starts with "Reviewers:" stays part of the summary
when the real Reviewers section follows it.
"""

from __future__ import annotations

import re

from revping_core.models import CommitMessage

SECTIONS = ("Summary", "Reviewers", "Reviewed By", "Subscribers", "Differential Revision")

_HEADER_RE = re.compile(r"(?:\A|(?<=\n\n))(" + "|".join(re.escape(s) for s in SECTIONS) + r"):[ \t]*")
_FIELDS = {
    "Summary": "summary",
    "Reviewers": "reviewers",
    "Reviewed By": "reviewed_by",
    "Subscribers": "subscribers",
    "Differential Revision": "revision",
}
_LIST_FIELDS = {"reviewers", "reviewed_by", "subscribers"}


def _split_names(text: str) -> list[str]:
    return [name.strip() for name in text.split(",") if name.strip()]


def split_sections(text: str) -> dict[str, str]:
    """Return ``{"title": ..., <section name>: ...}`` for the sections present."""
    headers = []
    next_rank = len(SECTIONS)
    for match in reversed(list(_HEADER_RE.finditer(text))):
        rank = SECTIONS.index(match.group(1))
        if rank < next_rank:
            headers.append(match)
            next_rank = rank
    headers.reverse()

    sections: dict[str, str] = {}
    current, start = "title", 0
    for match in headers:
        sections[current] = text[start : match.start()].strip()
        current, start = match.group(1), match.end()
    sections[current] = text[start:].strip()
    return sections


def parse_commit_message(text: str | None) -> CommitMessage:
    """Parse ``text`` into a CommitMessage; absent sections stay empty."""
    if not text:
        return CommitMessage()

    values: dict = {"title": ""}
    for name, body in split_sections(text.replace("\r\n", "\n")).items():
        attr = _FIELDS.get(name, "title")
        values[attr] = _split_names(body) if attr in _LIST_FIELDS else body
    return CommitMessage(**values)

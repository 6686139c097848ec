"""Typed records shared by the attribution heuristic and the scan driver.

Everything read from Conduit is converted into these dataclasses at the
boundary, so the rest of the code never pokes at raw JSON dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AuthorshipRecord:
    """Lines attributed to one author, for one file or aggregated across files."""

    author_name: str
    edit_count: int
    last_edit_at: datetime


# author_name -> record. Case-sensitive keys; insertion order is the scan order
# and decides ranking ties.
CreditTable = dict[str, AuthorshipRecord]


@dataclass
class CommitMessage:
    """Fields parsed out of a Differential commit message."""

    title: str = ""
    summary: str = ""
    reviewers: list[str] = field(default_factory=list)
    reviewed_by: list[str] = field(default_factory=list)
    subscribers: list[str] = field(default_factory=list)
    revision: str = ""


@dataclass
class ChangeRecord:
    """One open revision as seen by a scan cycle."""

    id: int
    title: str
    author_name: str
    last_modified: datetime
    explicit_reviewers: list[str] = field(default_factory=list)
    explicit_reviewed_by: list[str] = field(default_factory=list)
    touched_paths: list[str] = field(default_factory=list)

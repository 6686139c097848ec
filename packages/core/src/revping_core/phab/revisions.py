from __future__ import annotations

import logging
from datetime import datetime, timezone

from revping_core.models import ChangeRecord, CommitMessage
from revping_core.phab.commit_message import parse_commit_message
from revping_core.phab.conduit import ConduitClient, ConduitError
from revping_core.users import UserCache

logger = logging.getLogger(__name__)


def search_revisions(client: ConduitClient, query_key: str) -> list[dict]:
    """Return the raw revision objects matched by a saved query."""
    result = client.call("differential.revision.search", {"queryKey": query_key}) or {}
    return list(result.get("data") or [])


def fetch_user(client: ConduitClient, phid: str) -> dict:
    """Look up a single user by PHID; ``{}`` when Phabricator doesn't know it."""
    result = client.call("user.search", {"constraints": {"phids": [phid]}}) or {}
    data = result.get("data") or []
    return data[0] if data else {}


def username(user: dict) -> str:
    return (user.get("fields") or {}).get("username") or ""


def get_commit_message(client: ConduitClient, revision_id: int) -> CommitMessage:
    """Fetch and parse a revision's commit message.

    Falls back to an empty message on failure: the revision can still be
    reported, we just won't know its explicit reviewers.
    """
    try:
        text = client.call("differential.getcommitmessage", {"revision_id": revision_id})
    except ConduitError as e:
        logger.warning("Could not fetch commit message for D%s: %s", revision_id, e)
        return CommitMessage()
    return parse_commit_message(text if isinstance(text, str) else None)


def get_commit_paths(client: ConduitClient, revision_id: int) -> list[str]:
    try:
        paths = client.call("differential.getcommitpaths", {"revision_id": revision_id})
    except ConduitError as e:
        logger.warning("Could not fetch paths for D%s: %s", revision_id, e)
        return []
    return [p for p in (paths or []) if isinstance(p, str)]


def build_change(client: ConduitClient, revision: dict, users: UserCache) -> ChangeRecord:
    """Turn a raw revision object into a ChangeRecord."""
    fields = revision.get("fields") or {}
    revision_id = revision["id"]
    commit = get_commit_message(client, revision_id)
    author = users.get_or_fetch(fields.get("authorPHID") or "")

    modified = fields.get("dateModified") or fields.get("dateCreated") or 0
    return ChangeRecord(
        id=revision_id,
        title=fields.get("title") or commit.title,
        author_name=username(author),
        last_modified=datetime.fromtimestamp(modified, tz=timezone.utc),
        explicit_reviewers=commit.reviewers,
        explicit_reviewed_by=commit.reviewed_by,
        touched_paths=get_commit_paths(client, revision_id),
    )

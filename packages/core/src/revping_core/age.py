from __future__ import annotations

from datetime import datetime, timezone

# (threshold seconds, divisor, unit), coarsest first.
_BUCKETS = (
    (172_800, 86_400, "days"),
    (86_400, 86_400, "day"),
    (7_200, 3_600, "hrs"),
    (3_600, 3_600, "hr"),
    (120, 60, "mins"),
)


def time_ago(then: datetime, now: datetime | None = None) -> str:
    """Render the time since ``then`` as "3 days", "1 hr", "5 mins" and so on."""
    now = now or datetime.now(timezone.utc)
    elapsed = (now - then).total_seconds()
    for threshold, divisor, unit in _BUCKETS:
        if elapsed >= threshold:
            return f"{int(elapsed / divisor)} {unit}"
    return f"{int(elapsed / 60)} min"

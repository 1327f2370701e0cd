"""Group line records into commits."""

import logging
from datetime import datetime, tzinfo
from typing import Iterable

from commitscope.errors import EmptyDatasetError
from commitscope.models import Commit, LineRecord

logger = logging.getLogger(__name__)


def aggregate_commits(
    lines: Iterable[LineRecord],
    tz: tzinfo | None = None,
    url_template: str | None = None,
) -> list[Commit]:
    """Group records by commit id into commits sorted ascending by time.

    The first record seen for a commit supplies its author and timestamp;
    later records are not checked against it. Ties in timestamp keep the
    order in which the commits first appeared.

    Args:
        lines: Line records in dataset order.
        tz: Display time zone for timestamps. None keeps each record's offset.
        url_template: Optional format string with an ``{id}`` placeholder.

    Raises:
        EmptyDatasetError: No records were given.
    """
    grouped: dict[str, list[LineRecord]] = {}
    for record in lines:
        grouped.setdefault(record.commit_id, []).append(record)

    if not grouped:
        raise EmptyDatasetError("no line records to aggregate")

    commits: list[Commit] = []
    for commit_id, records in grouped.items():
        first = records[0]
        ts = first.timestamp.astimezone(tz) if tz is not None else first.timestamp
        commits.append(Commit(
            id=commit_id,
            author=first.author,
            timestamp=ts,
            hour_fraction=hour_fraction(ts),
            total_lines=len(records),
            url=url_template.format(id=commit_id) if url_template else None,
            lines=records,
        ))

    # sorted() is stable, so equal timestamps keep first-appearance order
    commits = sorted(commits, key=lambda c: c.timestamp)
    logger.info("Aggregated %d commits from %d records", len(commits), sum(c.total_lines for c in commits))
    return commits


def hour_fraction(ts: datetime) -> float:
    """Time of day as fractional hours, e.g. 9:30 -> 9.5."""
    return ts.hour + ts.minute / 60

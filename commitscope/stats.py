"""Derived statistics over an arbitrary commit set.

All functions here are pure: they read commits and their lines and return
new models. Empty inputs produce zeroed results, never a division fault.
"""

import math
from collections import Counter, defaultdict
from datetime import date
from typing import Iterable, Sequence

from commitscope.models import (
    ActivityBucket,
    Commit,
    DailyMode,
    DailyTotal,
    DayActivity,
    FileGrowth,
    FileGrowthColumn,
    FileGrowthSegment,
    FileUnit,
    LanguageShare,
    LineRecord,
    Stats,
)

MOST_ACTIVE_DAYS = 5
TOP_DAYS = 7


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def summarize(commits: Sequence[Commit]) -> Stats:
    """Totals, file counts and the file-type breakdown for a commit set."""
    lines = [line for c in commits for line in c.lines]
    total_lines = sum(c.total_lines for c in commits)
    per_file = Counter(line.file for line in lines)

    return Stats(
        total_lines=total_lines,
        commit_count=len(commits),
        file_count=len(per_file),
        longest_file_lines=max(per_file.values(), default=0),
        avg_lines_per_commit=_round_half_up(total_lines / len(commits)) if commits else 0,
        language_breakdown=language_breakdown(lines),
    )


def language_breakdown(lines: Sequence[LineRecord]) -> dict[str, LanguageShare]:
    """Line count and percentage per file type, in first-seen order.

    Returns an empty mapping when there are no lines.
    """
    counts = Counter(line.file_type for line in lines)
    total = sum(counts.values())
    if total == 0:
        return {}
    return {
        file_type: LanguageShare(count=count, percent=count / total * 100)
        for file_type, count in counts.items()
    }


def summarize_by_day(commits: Sequence[Commit]) -> list[DailyTotal]:
    """Changed lines per calendar day, ascending by date."""
    per_day: dict[date, int] = defaultdict(int)
    for c in commits:
        per_day[c.local_date] += c.total_lines
    return [DailyTotal(date=d, line_count=n) for d, n in sorted(per_day.items())]


def count_days(commits: Sequence[Commit]) -> int:
    """Number of distinct calendar days with at least one commit."""
    return len({c.local_date for c in commits})


def file_units(lines: Iterable[LineRecord]) -> list[FileUnit]:
    """Group lines by file, largest file first (ties keep first-seen order)."""
    by_file: dict[str, list[LineRecord]] = {}
    for line in lines:
        by_file.setdefault(line.file, []).append(line)
    units = [FileUnit(name=name, lines=recs) for name, recs in by_file.items()]
    return sorted(units, key=lambda u: -u.line_count)


def daily_activity(commits: Sequence[Commit], mode: DailyMode | str = DailyMode.ALL) -> list[DayActivity]:
    """Per-day commit, file and line counts, filtered by ``mode``.

    Rows are ordered by commit count descending, except for the
    ``file-types`` and ``code-lines`` modes, which rank by their own measure.
    """
    mode = DailyMode(mode)
    by_day: dict[date, list[Commit]] = defaultdict(list)
    for c in commits:
        by_day[c.local_date].append(c)

    days: list[DayActivity] = []
    for day, day_commits in by_day.items():
        day_lines = [line for c in day_commits for line in c.lines]
        days.append(DayActivity(
            day=day,
            commit_count=len(day_commits),
            file_count=len({line.file for line in day_lines}),
            line_count=len(day_lines),
            file_types=sorted({line.file_type for line in day_lines}),
            is_weekend=day.weekday() >= 5,
        ))

    days.sort(key=lambda d: (-d.commit_count, d.day))
    if mode == DailyMode.MOST_ACTIVE:
        return days[:MOST_ACTIVE_DAYS]
    if mode == DailyMode.FILE_TYPES:
        return sorted(days, key=lambda d: -len(d.file_types))[:TOP_DAYS]
    if mode == DailyMode.CODE_LINES:
        return sorted(days, key=lambda d: -d.line_count)[:TOP_DAYS]
    return days


def weekday_weekend_split(days: Iterable[DayActivity]) -> tuple[ActivityBucket, ActivityBucket]:
    weekday = ActivityBucket(label="Weekdays")
    weekend = ActivityBucket(label="Weekends")
    for d in days:
        bucket = weekend if d.is_weekend else weekday
        bucket.days += 1
        bucket.commits += d.commit_count
        bucket.files += d.file_count
        bucket.lines += d.line_count
    return weekday, weekend


def file_growth(commits: Sequence[Commit], days_to_show: int) -> FileGrowth:
    """Stack each file's changed lines by day over the first ``days_to_show`` days."""
    by_day: dict[date, list[LineRecord]] = defaultdict(list)
    for c in commits:
        by_day[c.local_date].extend(c.lines)

    ordered_days = sorted(by_day)
    shown = ordered_days[:max(days_to_show, 0)]

    per_file: dict[str, dict[date, int]] = defaultdict(dict)
    for day in shown:
        for file, n in Counter(line.file for line in by_day[day]).items():
            per_file[file][day] = n

    columns: list[FileGrowthColumn] = []
    for name, day_counts in per_file.items():
        segments: list[FileGrowthSegment] = []
        height = 0
        for day in shown:
            n = day_counts.get(day, 0)
            if n:
                segments.append(FileGrowthSegment(date=day, y0=height, y1=height + n))
                height += n
        columns.append(FileGrowthColumn(name=name, total=height, segments=segments))
    columns.sort(key=lambda col: -col.total)

    return FileGrowth(
        days_shown=len(shown),
        total_days=len(ordered_days),
        dates=shown,
        files=columns,
    )

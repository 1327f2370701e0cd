"""Scales mapping commit data to screen space.

The brush selects in screen coordinates, so these scales are part of the
filtering semantics, not just drawing.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from commitscope.config import PlotConfig
from commitscope.models import Commit

HOURS_IN_DAY = 24


@dataclass(frozen=True)
class PlotArea:
    """Usable drawing rectangle inside the margins, in screen pixels."""
    top: float
    right: float
    bottom: float
    left: float

    @classmethod
    def from_config(cls, plot: PlotConfig) -> "PlotArea":
        return cls(
            top=plot.margin_top,
            right=plot.width - plot.margin_right,
            bottom=plot.height - plot.margin_bottom,
            left=plot.margin_left,
        )

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (value - r0) / (r1 - r0) * (d1 - d0)


@dataclass(frozen=True)
class SqrtScale:
    """Area-proportional radius scale."""
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        inner = LinearScale((math.sqrt(self.domain[0]), math.sqrt(self.domain[1])), self.range)
        return inner(math.sqrt(max(value, 0)))


@dataclass(frozen=True)
class TimeScale:
    """Linear scale over aware datetimes, measured in epoch seconds."""
    domain: tuple[datetime, datetime]
    range: tuple[float, float]

    def _linear(self) -> LinearScale:
        return LinearScale((self.domain[0].timestamp(), self.domain[1].timestamp()), self.range)

    def __call__(self, value: datetime) -> float:
        return self._linear()(value.timestamp())

    def invert(self, value: float) -> datetime:
        seconds = self._linear().invert(value)
        return datetime.fromtimestamp(seconds, tz=self.domain[0].tzinfo)

    def nice(self) -> "TimeScale":
        """Extend the domain outward to whole days, or whole hours for spans under a day."""
        start, end = self.domain
        unit = timedelta(days=1) if end - start >= timedelta(days=1) else timedelta(hours=1)
        return TimeScale((_floor(start, unit), _ceil(end, unit)), self.range)


def _floor(ts: datetime, unit: timedelta) -> datetime:
    if unit >= timedelta(days=1):
        return ts.replace(hour=0, minute=0, second=0, microsecond=0)
    return ts.replace(minute=0, second=0, microsecond=0)


def _ceil(ts: datetime, unit: timedelta) -> datetime:
    floored = _floor(ts, unit)
    return floored if floored == ts else floored + unit


@dataclass(frozen=True)
class PlotScales:
    """Scatterplot scales for one commit domain."""
    x: TimeScale
    y: LinearScale
    r: SqrtScale

    @classmethod
    def for_commits(
        cls,
        commits: Sequence[Commit],
        area: PlotArea,
        radius: tuple[float, float] = (3.0, 20.0),
    ) -> "PlotScales | None":
        """Build scales over ``commits``; None when there is nothing to plot."""
        if not commits:
            return None
        times = [c.timestamp for c in commits]
        sizes = [c.total_lines for c in commits]
        return cls(
            x=TimeScale((min(times), max(times)), (area.left, area.right)).nice(),
            y=LinearScale((0, HOURS_IN_DAY), (area.bottom, area.top)),
            r=SqrtScale((min(sizes), max(sizes)), radius),
        )

    def project(self, commit: Commit) -> tuple[float, float]:
        """Screen position of a commit's dot."""
        return self.x(commit.timestamp), self.y(commit.hour_fraction)


SLIDER_RANGE = (0.0, 100.0)


def slider_scale(commits: Sequence[Commit]) -> TimeScale:
    """Map the full commit time span onto the 0-100 slider."""
    return TimeScale((commits[0].timestamp, commits[-1].timestamp), SLIDER_RANGE)


def slider_to_timestamp(scale: TimeScale, value: float) -> datetime:
    # Ends map to the exact domain bounds; float round-tripping could drop the last commit
    if value >= SLIDER_RANGE[1]:
        return scale.domain[1]
    if value <= SLIDER_RANGE[0]:
        return scale.domain[0]
    return scale.invert(value)

"""Base renderer interface.

The engine only ever calls into a renderer; nothing it returns is consumed.
"""

import abc
from typing import Sequence

from commitscope.models import Commit, DailyTotal, FileGrowth, FileUnit, Stage, Stats
from commitscope.scales import PlotScales


class Renderer(abc.ABC):
    """Drawing surface for the dashboard views."""

    @abc.abstractmethod
    def has_target(self, target: str) -> bool:
        """Whether the surface has an anchor for the named view."""
        ...

    @abc.abstractmethod
    def draw_scatter(
        self,
        commits: Sequence[Commit],
        scales: PlotScales | None,
        selected_ids: set[str],
        stats: Stats,
    ) -> None:
        """Commits by time of day, with the summary stats panel beside it.

        ``scales`` is None when there are no commits to plot.
        """
        ...

    @abc.abstractmethod
    def draw_breakdown(self, stats: Stats) -> None:
        ...

    @abc.abstractmethod
    def draw_daily_bars(self, daily: Sequence[DailyTotal]) -> None:
        ...

    @abc.abstractmethod
    def draw_file_units(self, units: Sequence[FileUnit]) -> None:
        ...

    @abc.abstractmethod
    def draw_file_growth(self, growth: FileGrowth, stage: Stage) -> None:
        ...

    @abc.abstractmethod
    def draw_narration_slice(
        self,
        commits: Sequence[Commit],
        start_index: int,
        captions: Sequence[str],
        target: str = "narration",
    ) -> None:
        """One window of a scrolling caption track (commit narration or file evolution)."""
        ...

    @abc.abstractmethod
    def draw_message(self, text: str) -> None:
        """Replace the dashboard with a status message (load failure, no data)."""
        ...

    def flush(self) -> None:
        """Persist whatever has been drawn. Optional."""

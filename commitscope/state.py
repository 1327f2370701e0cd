"""Filter state: the single owner of every interactive input.

Each input channel writes exactly one field through its own setter:

    time slider -> set_max_timestamp
    brush       -> set_brush
    dropdown    -> set_dropdown_commit
    scroll      -> set_scroll_step

Everything else (time-filtered commits, brush selection, active set) is
derived on demand in ``snapshot()`` and never stored.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

from commitscope.models import BrushRect, Commit, LineRecord, Stage
from commitscope.scales import PlotArea, PlotScales

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterSnapshot:
    """Read-only view of the filter state and its derived sets."""
    max_timestamp: datetime
    brush: BrushRect | None
    dropdown_commit_id: str | None
    scroll_step_index: int
    time_filtered: tuple[Commit, ...]
    brush_selected: tuple[Commit, ...]
    active_commits: tuple[Commit, ...]
    scales: PlotScales | None

    @property
    def active_lines(self) -> list[LineRecord]:
        return [line for c in self.active_commits for line in c.lines]

    @property
    def selected_ids(self) -> set[str]:
        return {c.id for c in self.brush_selected}


Subscriber = Callable[[FilterSnapshot], None]


class FilterState:
    """Mutable interactive state for one session."""

    def __init__(
        self,
        commits: Sequence[Commit],
        area: PlotArea,
        radius: tuple[float, float] = (3.0, 20.0),
    ) -> None:
        if not commits:
            raise ValueError("FilterState needs at least one commit")
        self._commits = tuple(commits)
        self._ids = {c.id for c in self._commits}
        self._area = area
        self._radius = radius
        self._subscribers: list[Subscriber] = []

        self._max_timestamp: datetime = max(c.timestamp for c in self._commits)
        self._brush: BrushRect | None = None
        self._dropdown_commit_id: str | None = None
        self._scroll_step_index: int = 0

    @property
    def commits(self) -> tuple[Commit, ...]:
        return self._commits

    @property
    def scroll_step_index(self) -> int:
        return self._scroll_step_index

    def subscribe(self, callback: Subscriber) -> None:
        """Register a callback run synchronously after every effective change."""
        self._subscribers.append(callback)

    # --- Setters (one writer per field) ---

    def set_max_timestamp(self, ts: datetime) -> bool:
        if ts.tzinfo is None:
            raise ValueError("max timestamp must be timezone-aware")
        return self._update("max_timestamp", ts)

    def set_brush(self, rect: BrushRect | None) -> bool:
        return self._update("brush", rect)

    def set_dropdown_commit(self, commit_id: str | None) -> bool:
        if commit_id is not None and commit_id not in self._ids:
            raise ValueError(f"Unknown commit id {commit_id!r}")
        return self._update("dropdown_commit_id", commit_id)

    def set_scroll_step(self, index: int) -> bool:
        if not 0 <= index < len(Stage):
            raise ValueError(f"Scroll step must name a stage (0-{len(Stage) - 1}), got {index}")
        return self._update("scroll_step_index", index)

    def _update(self, field: str, value: object) -> bool:
        """Assign a field and notify subscribers. Unchanged values are a no-op."""
        attr = f"_{field}"
        if getattr(self, attr) == value:
            return False
        setattr(self, attr, value)
        logger.debug("Filter state %s -> %s", field, value)
        snapshot = self.snapshot()
        for callback in self._subscribers:
            callback(snapshot)
        return True

    # --- Derivation ---

    def snapshot(self) -> FilterSnapshot:
        time_filtered = tuple(c for c in self._commits if c.timestamp <= self._max_timestamp)
        # Scales follow the time-filtered domain; brush hits are re-evaluated against them
        scales = PlotScales.for_commits(time_filtered, self._area, self._radius)

        brush_selected: tuple[Commit, ...] = ()
        if self._brush is not None and scales is not None:
            brush_selected = tuple(
                c for c in time_filtered if self._brush.contains(*scales.project(c))
            )

        if self._dropdown_commit_id is not None:
            dropdown_filtered = tuple(c for c in time_filtered if c.id == self._dropdown_commit_id)
        else:
            dropdown_filtered = time_filtered

        return FilterSnapshot(
            max_timestamp=self._max_timestamp,
            brush=self._brush,
            dropdown_commit_id=self._dropdown_commit_id,
            scroll_step_index=self._scroll_step_index,
            time_filtered=time_filtered,
            brush_selected=brush_selected,
            active_commits=brush_selected or dropdown_filtered,
            scales=scales,
        )

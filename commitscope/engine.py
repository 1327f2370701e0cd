"""Dashboard engine: wires the data layer, filter state, scroll controller and views.

A Dashboard can only be built from an aggregated commit list, so no input
handler can run before the dataset has loaded.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence, TextIO
from zoneinfo import ZoneInfo

from commitscope.aggregate import aggregate_commits
from commitscope.config import Config
from commitscope.errors import EmptyDatasetError, LoadError
from commitscope.models import BrushRect, Commit, Stage
from commitscope.output.base import Renderer
from commitscope.scales import PlotArea, slider_scale, slider_to_timestamp
from commitscope.scroll import ScrollController, window_slice
from commitscope.state import FilterSnapshot, FilterState
from commitscope.store import load_line_records
from commitscope.views import (
    BreakdownView,
    DailyBarsView,
    EvolutionNarrationView,
    FileGrowthView,
    FileUnitsView,
    NarrationView,
    RenderPass,
    ScatterView,
    ViewPipeline,
)

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Could not load commit history"
NO_DATA_MESSAGE = "No commit data"


class Dashboard:
    """One interactive session over a fixed commit history."""

    def __init__(self, commits: Sequence[Commit], renderer: Renderer, config: Config) -> None:
        self.commits = list(commits)
        self.renderer = renderer
        self.config = config

        plot = config.plot
        self.state = FilterState(
            self.commits, PlotArea.from_config(plot), (plot.min_radius, plot.max_radius),
        )
        self.scroll = ScrollController(self.state, config.scroll)
        self.slider = slider_scale(self.commits)

        self.pipeline = ViewPipeline([
            ScatterView(renderer),
            BreakdownView(renderer),
            DailyBarsView(renderer),
            FileUnitsView(renderer),
            FileGrowthView(renderer, config.scroll),
        ])
        self.narration = NarrationView(renderer, self.commits)
        self.evolution = EvolutionNarrationView(renderer, self.commits)
        self.evolution_offset = 0.0
        self.state.subscribe(self.pipeline)

    # --- Input handlers ---

    def on_slider(self, value: float) -> None:
        """Time slider moved (0-100)."""
        self.state.set_max_timestamp(slider_to_timestamp(self.slider, value))

    def on_brush(self, rect: BrushRect | Sequence[float] | None) -> None:
        if rect is not None and not isinstance(rect, BrushRect):
            rect = BrushRect.model_validate(rect)
        self.state.set_brush(rect)

    def on_dropdown(self, commit_id: str | None) -> None:
        self.state.set_dropdown_commit(commit_id or None)

    def on_stage_entered(self, stage_id: Stage | str) -> None:
        self.scroll.enter(stage_id)

    def on_scroll(self, offset: float) -> tuple[int, int]:
        """Narration list scrolled; redraw the visible window."""
        start, end = self.scroll.scroll_to(offset, len(self.commits))
        self.narration.render(start, end)
        return start, end

    def on_evolution_scroll(self, offset: float) -> tuple[int, int]:
        """File-evolution list scrolled. Windowed like the narration list, with its own offset."""
        self.evolution_offset = max(offset, 0.0)
        scroll = self.config.scroll
        start, end = window_slice(self.evolution_offset, scroll.item_height, scroll.window_size, len(self.commits))
        self.evolution.render(start, end)
        return start, end

    # --- Reads ---

    def snapshot(self) -> FilterSnapshot:
        return self.state.snapshot()

    @property
    def stage(self) -> Stage:
        return self.scroll.stage

    def render_all(self) -> RenderPass:
        """Initial full render: every filter view plus both caption tracks."""
        pass_ = self.pipeline(self.state.snapshot())
        self.on_scroll(self.scroll.offset)
        self.on_evolution_scroll(self.evolution_offset)
        return pass_


def load_commits(source: str | Path | TextIO, config: Config) -> list[Commit]:
    """Load the dataset and group it into commits in the configured display zone."""
    records = load_line_records(source)
    tz = ZoneInfo(config.display_timezone) if config.display_timezone else None
    return aggregate_commits(records, tz=tz, url_template=config.commit_url_template)


def build_dashboard(
    source: str | Path | TextIO,
    renderer: Renderer,
    config: Config,
) -> Dashboard:
    """Load, aggregate and wire a dashboard. Data-layer errors propagate."""
    return Dashboard(load_commits(source, config), renderer, config)


def open_dashboard(
    source: str | Path | TextIO,
    renderer: Renderer,
    config: Config,
) -> Dashboard | None:
    """Top-level entry: build and render a dashboard, surfacing data errors once.

    Returns None when the dataset is empty; a "no data" message is drawn.

    Raises:
        LoadError: After drawing the load-failure message.
    """
    try:
        dashboard = build_dashboard(source, renderer, config)
    except EmptyDatasetError:
        logger.warning("Dataset has no commits")
        renderer.draw_message(NO_DATA_MESSAGE)
        return None
    except LoadError as e:
        logger.error("%s: %s", LOAD_FAILED_MESSAGE, e)
        renderer.draw_message(LOAD_FAILED_MESSAGE)
        raise

    dashboard.render_all()
    return dashboard


EVENT_HANDLERS = {
    "slider": "on_slider",
    "brush": "on_brush",
    "dropdown": "on_dropdown",
    "scroll": "on_scroll",
    "evolution-scroll": "on_evolution_scroll",
    "stage": "on_stage_entered",
}


def replay_events(dashboard: Dashboard, events: Iterable[dict[str, Any]]) -> int:
    """Feed recorded input events through the dashboard handlers, in order.

    Each event is ``{"event": <name>, "value": ...}`` with a name from EVENT_HANDLERS.
    Returns the number of events applied.
    """
    applied = 0
    for i, event in enumerate(events, start=1):
        kind = event.get("event")
        handler = EVENT_HANDLERS.get(kind)
        if handler is None:
            raise ValueError(f"event {i}: unknown event type {kind!r}")
        getattr(dashboard, handler)(event.get("value"))
        applied += 1
    logger.info("Replayed %d events", applied)
    return applied

"""View synchronizers: the ordered refresh pipeline behind every state change."""

import abc
import logging
from dataclasses import dataclass
from typing import Sequence

from commitscope.config import ScrollConfig
from commitscope.errors import RenderTargetMissingError
from commitscope.models import Commit, Stage, Stats
from commitscope.narrative import narrate_commit, narrate_file_evolution
from commitscope.output.base import Renderer
from commitscope.scroll import days_to_show
from commitscope.state import FilterSnapshot
from commitscope.stats import count_days, file_growth, file_units, summarize, summarize_by_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderPass:
    """Everything one refresh hands to its views."""
    snapshot: FilterSnapshot
    stats: Stats


class View(abc.ABC):
    target: str = ""

    def __init__(self, renderer: Renderer) -> None:
        self.renderer = renderer

    def render(self, pass_: RenderPass) -> None:
        if not self.renderer.has_target(self.target):
            raise RenderTargetMissingError(self.target)
        self.draw(pass_)

    @abc.abstractmethod
    def draw(self, pass_: RenderPass) -> None:
        ...


class ScatterView(View):
    target = "scatter"

    def draw(self, pass_: RenderPass) -> None:
        snap = pass_.snapshot
        # Largest dots first so small commits stay on top
        dots = sorted(snap.time_filtered, key=lambda c: -c.total_lines)
        self.renderer.draw_scatter(dots, snap.scales, snap.selected_ids, pass_.stats)


class BreakdownView(View):
    target = "breakdown"

    def draw(self, pass_: RenderPass) -> None:
        self.renderer.draw_breakdown(pass_.stats)


class DailyBarsView(View):
    target = "daily-bars"

    def draw(self, pass_: RenderPass) -> None:
        self.renderer.draw_daily_bars(summarize_by_day(pass_.snapshot.active_commits))


class FileUnitsView(View):
    target = "file-units"

    def draw(self, pass_: RenderPass) -> None:
        self.renderer.draw_file_units(file_units(pass_.snapshot.active_lines))


class FileGrowthView(View):
    target = "file-growth"

    def __init__(self, renderer: Renderer, scroll: ScrollConfig) -> None:
        super().__init__(renderer)
        self.scroll = scroll

    def draw(self, pass_: RenderPass) -> None:
        snap = pass_.snapshot
        stage = list(Stage)[snap.scroll_step_index]
        shown = days_to_show(stage, count_days(snap.time_filtered), self.scroll.stages)
        self.renderer.draw_file_growth(file_growth(snap.time_filtered, shown), stage)


class ViewPipeline:
    """Recompute stats, then redraw each view in order.

    A view that fails is logged and skipped; its siblings still render.
    """

    def __init__(self, views: Sequence[View]) -> None:
        self.views = list(views)
        self.last_pass: RenderPass | None = None

    def __call__(self, snapshot: FilterSnapshot) -> RenderPass:
        pass_ = RenderPass(snapshot=snapshot, stats=summarize(snapshot.active_commits))
        self.last_pass = pass_
        for view in self.views:
            _render_isolated(view.target, lambda: view.render(pass_))
        return pass_


class NarrationView:
    """Commit-by-commit narration list, driven by scroll offset rather than filters."""
    target = "narration"

    def __init__(self, renderer: Renderer, commits: Sequence[Commit]) -> None:
        self.renderer = renderer
        self.commits = list(commits)

    def captions(self, start: int, window: Sequence[Commit]) -> list[str]:
        return [narrate_commit(c, start + i) for i, c in enumerate(window)]

    def render(self, start: int, end: int) -> None:
        def draw() -> None:
            if not self.renderer.has_target(self.target):
                raise RenderTargetMissingError(self.target)
            window = self.commits[start:end]
            self.renderer.draw_narration_slice(window, start, self.captions(start, window), self.target)

        _render_isolated(self.target, draw)


class EvolutionNarrationView(NarrationView):
    """File-evolution track: captions count files seen up to the end of the window."""
    target = "file-evolution"

    def captions(self, start: int, window: Sequence[Commit]) -> list[str]:
        visible = self.commits[:start + len(window)]
        return [
            narrate_file_evolution(c, i, visible, first_window=start == 0)
            for i, c in enumerate(window)
        ]


def _render_isolated(target: str, draw) -> None:
    try:
        draw()
    except RenderTargetMissingError:
        logger.warning("Skipping view %s: render target missing", target)
    except Exception:
        logger.exception("View %s failed to render", target)

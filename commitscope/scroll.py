"""Scroll controller for the two scrollytelling tracks.

Stage track: intersection callbacks move between narrative stages, each of
which reveals a growing fraction of the project's days.

Narration track: a virtualized list that maps a continuous scroll offset to a
fixed-size window of commits.
"""

import logging
import math

from commitscope.config import ScrollConfig, StageConfig
from commitscope.models import Stage
from commitscope.state import FilterState

logger = logging.getLogger(__name__)


def days_to_show(stage: Stage, total_days: int, stages: dict[Stage, StageConfig]) -> int:
    """How many leading days a stage reveals, never more than exist."""
    if stage == Stage.COMPLETE:
        return total_days
    cfg = stages[stage]
    wanted = max(cfg.minimum, math.ceil(total_days * cfg.fraction))
    return min(wanted, total_days)


def window_slice(offset: float, item_height: float, window_size: int, total: int) -> tuple[int, int]:
    """Visible ``[start, end)`` slice of a virtualized list at a scroll offset."""
    if item_height <= 0:
        raise ValueError("item_height must be positive")
    start = math.floor(offset / item_height)
    start = max(0, min(start, total - window_size))
    return start, min(start + window_size, total)


class ScrollController:
    """Stage state machine feeding ``scroll_step_index`` into FilterState."""

    def __init__(self, state: FilterState, config: ScrollConfig) -> None:
        self.state = state
        self.config = config
        self.offset = 0.0

    @property
    def stage(self) -> Stage:
        return list(Stage)[self.state.scroll_step_index]

    def enter(self, stage_id: Stage | str) -> bool:
        """A stage marker entered the viewport.

        Returns False when the stage is already active, so scroll jitter on a
        marker does not trigger another render.
        """
        stage = Stage(stage_id)
        if stage == self.stage:
            logger.debug("Stage %s already active", stage.value)
            return False
        logger.info("Scroll stage %s -> %s", self.stage.value, stage.value)
        self.state.set_scroll_step(stage.position)
        return True

    def days_to_show(self, total_days: int) -> int:
        return days_to_show(self.stage, total_days, self.config.stages)

    def scroll_to(self, offset: float, total: int) -> tuple[int, int]:
        """Record a narration scroll offset and return its visible window."""
        self.offset = max(offset, 0.0)
        return window_slice(self.offset, self.config.item_height, self.config.window_size, total)

    def spacer_height(self, total: int) -> int:
        """Height of the scroll spacer that makes every commit reachable."""
        return max(total - 1, 0) * self.config.item_height

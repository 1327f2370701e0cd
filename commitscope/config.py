"""Configuration loading for commitscope."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from commitscope.models import Stage


class PlotConfig(BaseModel):
    width: int = 1100
    height: int = 700
    margin_top: int = 40
    margin_right: int = 40
    margin_bottom: int = 60
    margin_left: int = 70
    min_radius: float = 3.0
    max_radius: float = 20.0


class StageConfig(BaseModel):
    fraction: float
    minimum: int = 0


def _default_stages() -> dict[Stage, StageConfig]:
    return {
        Stage.INTRO: StageConfig(fraction=0.15, minimum=1),
        Stage.EARLY: StageConfig(fraction=0.35, minimum=2),
        Stage.MID: StageConfig(fraction=0.60, minimum=3),
        Stage.LATE: StageConfig(fraction=0.85, minimum=4),
        Stage.COMPLETE: StageConfig(fraction=1.0),
    }


class ScrollConfig(BaseModel):
    item_height: int = 150
    window_size: int = 10
    stages: dict[Stage, StageConfig] = Field(default_factory=_default_stages)

    @field_validator("stages")
    @classmethod
    def _fill_missing_stages(cls, v: dict[Stage, StageConfig]) -> dict[Stage, StageConfig]:
        return {**_default_stages(), **v}


class RenderConfig(BaseModel):
    targets: list[str] = Field(default_factory=lambda: [
        "scatter", "breakdown", "daily-bars", "file-units", "file-growth", "narration", "file-evolution",
    ])
    font_regular: str = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
    font_bold: str = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"


class Config(BaseModel):
    data_path: str = "loc.csv"
    output_dir: str = "output"
    display_timezone: str | None = None  # IANA name; None keeps each commit's own offset
    commit_url_template: str | None = None  # e.g. "https://github.com/owner/repo/commit/{id}"
    plot: PlotConfig = Field(default_factory=PlotConfig)
    scroll: ScrollConfig = Field(default_factory=ScrollConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @property
    def resolved_data_path(self) -> Path:
        """Resolve data_path relative to project root."""
        p = Path(self.data_path)
        if p.is_absolute():
            return p
        return _project_root() / p

    @property
    def resolved_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()


def _project_root() -> Path:
    """Return the commitscope project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()

"""Pydantic models for commitscope."""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Stage(str, Enum):
    """Narrative stages of the file-growth scrollytelling track, in order."""
    INTRO = "intro"
    EARLY = "early"
    MID = "mid"
    LATE = "late"
    COMPLETE = "complete"

    @property
    def position(self) -> int:
        return list(Stage).index(self)


class DailyMode(str, Enum):
    ALL = "all"
    MOST_ACTIVE = "most-active"
    WEEKEND_VS_WEEKDAY = "weekend-vs-weekday"
    FILE_TYPES = "file-types"
    CODE_LINES = "code-lines"


# --- Data layer ---


class LineRecord(BaseModel):
    """One changed source line in one commit. Never mutated after load."""
    model_config = ConfigDict(frozen=True)

    commit_id: str
    file: str
    line_number: int
    depth: int
    length: int
    file_type: str
    timestamp: dt.datetime
    author: str


class Commit(BaseModel):
    """All line records sharing one commit id.

    ``lines`` is a back-reference into the record store. It is left out of
    ``model_dump()``, ``repr()`` and equality.
    """
    id: str
    author: str
    timestamp: dt.datetime
    hour_fraction: float
    total_lines: int
    url: str | None = None
    lines: list[LineRecord] = Field(default_factory=list, exclude=True, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def local_date(self) -> dt.date:
        return self.timestamp.date()


# --- Interaction ---


class BrushRect(BaseModel):
    """Screen-space brush rectangle, normalized so x0 <= x1 and y0 <= y1."""
    model_config = ConfigDict(frozen=True)

    x0: float
    y0: float
    x1: float
    y1: float

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) == 2:
                (x0, y0), (x1, y1) = data
            else:
                x0, y0, x1, y1 = data
            data = {"x0": x0, "y0": y0, "x1": x1, "y1": y1}
        if isinstance(data, dict) and {"x0", "y0", "x1", "y1"} <= data.keys():
            data = dict(data)
            data["x0"], data["x1"] = sorted((float(data["x0"]), float(data["x1"])))
            data["y0"], data["y1"] = sorted((float(data["y0"]), float(data["y1"])))
        return data

    def contains(self, x: float, y: float) -> bool:
        """Inclusive on every edge."""
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1


# --- Derived statistics ---


class LanguageShare(BaseModel):
    count: int
    percent: float


class Stats(BaseModel):
    total_lines: int = 0
    commit_count: int = 0
    file_count: int = 0
    longest_file_lines: int = 0
    avg_lines_per_commit: int = 0
    language_breakdown: dict[str, LanguageShare] = Field(default_factory=dict)

    @property
    def has_language_data(self) -> bool:
        return bool(self.language_breakdown)


class DailyTotal(BaseModel):
    date: dt.date
    line_count: int


class DayActivity(BaseModel):
    day: dt.date
    commit_count: int
    file_count: int
    line_count: int
    file_types: list[str]
    is_weekend: bool


class ActivityBucket(BaseModel):
    """Weekday or weekend aggregate of several DayActivity rows."""
    label: str
    days: int = 0
    commits: int = 0
    files: int = 0
    lines: int = 0

    @property
    def commits_per_day(self) -> float:
        return self.commits / self.days if self.days else 0.0


class FileUnit(BaseModel):
    """A file and the active lines that touched it, for the unit diagram."""
    name: str
    lines: list[LineRecord]

    @property
    def line_count(self) -> int:
        return len(self.lines)


class FileGrowthSegment(BaseModel):
    date: dt.date
    y0: int
    y1: int

    @property
    def height(self) -> int:
        return self.y1 - self.y0


class FileGrowthColumn(BaseModel):
    name: str
    total: int
    segments: list[FileGrowthSegment]


class FileGrowth(BaseModel):
    """Per-file stacked line counts over the first ``days_shown`` days."""
    days_shown: int
    total_days: int
    dates: list[dt.date] = Field(default_factory=list)
    files: list[FileGrowthColumn] = Field(default_factory=list)

    @property
    def percent_shown(self) -> int:
        if not self.total_days:
            return 0
        return round(self.days_shown / self.total_days * 100)

"""Shared test fixtures for commitscope tests."""

from datetime import datetime, timedelta, timezone

import pytest

from commitscope.aggregate import aggregate_commits
from commitscope.config import Config
from commitscope.models import LineRecord
from commitscope.output.base import Renderer

UTC = timezone.utc


def make_lines(
    commit_id: str,
    ts: datetime,
    files: dict[str, int],
    author: str = "kim",
) -> list[LineRecord]:
    """Build line records for one commit: ``files`` maps path -> changed lines."""
    records: list[LineRecord] = []
    for path, count in files.items():
        ext = path.rsplit(".", 1)[-1]
        for n in range(1, count + 1):
            records.append(LineRecord(
                commit_id=commit_id, file=path, line_number=n, depth=1, length=20,
                file_type=ext, timestamp=ts, author=author,
            ))
    return records


class RecordingRenderer(Renderer):
    """Renderer that records every draw call in order."""

    def __init__(self, missing: set[str] | None = None) -> None:
        self.missing = missing or set()
        self.calls: list[tuple[str, tuple]] = []

    def has_target(self, target: str) -> bool:
        return target not in self.missing

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))

    def draw_scatter(self, commits, scales, selected_ids, stats):
        self._record("scatter", list(commits), scales, set(selected_ids), stats)

    def draw_breakdown(self, stats):
        self._record("breakdown", stats)

    def draw_daily_bars(self, daily):
        self._record("daily-bars", list(daily))

    def draw_file_units(self, units):
        self._record("file-units", list(units))

    def draw_file_growth(self, growth, stage):
        self._record("file-growth", growth, stage)

    def draw_narration_slice(self, commits, start_index, captions, target="narration"):
        self._record(target, list(commits), start_index, list(captions))

    def draw_message(self, text):
        self._record("message", text)

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def last(self, name: str) -> tuple:
        for call_name, args in reversed(self.calls):
            if call_name == name:
                return args
        raise AssertionError(f"{name} was never drawn")


@pytest.fixture()
def config():
    return Config()


@pytest.fixture()
def renderer():
    return RecordingRenderer()


@pytest.fixture()
def three_commit_lines():
    """Commits at 9:00, 9:30 and 23:00 on consecutive days with 5, 3 and 10 lines."""
    day = datetime(2025, 2, 3, tzinfo=UTC)
    return (
        make_lines("aaa1111", day + timedelta(hours=9), {"src/app.py": 3, "README.md": 2})
        + make_lines("bbb2222", day + timedelta(days=1, hours=9, minutes=30), {"src/app.py": 3})
        + make_lines("ccc3333", day + timedelta(days=2, hours=23), {"src/style.css": 6, "src/app.py": 4})
    )


@pytest.fixture()
def three_commits(three_commit_lines):
    return aggregate_commits(three_commit_lines)


@pytest.fixture()
def ten_day_lines():
    """One commit per day for ten days, touching a rotating set of files."""
    start = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
    lines: list[LineRecord] = []
    for i in range(10):
        files = {f"src/mod{i % 3}.py": i + 1, "index.html": 1}
        lines += make_lines(f"c{i:02d}", start + timedelta(days=i), files)
    return lines


SAMPLE_CSV = """\
file,line,type,commit,author,date,time,timezone,datetime,depth,length
src/main.js,1,js,a1b2c3d,kim,2025-02-10,09:15:00,-08:00,2025-02-10T09:15:00-08:00,0,22
src/main.js,2,js,a1b2c3d,kim,2025-02-10,09:15:00,-08:00,2025-02-10T09:15:00-08:00,1,40
index.html,1,html,a1b2c3d,kim,2025-02-10,09:15:00,-08:00,2025-02-10T09:15:00-08:00,2,15
src/style.css,4,css,e4f5a6b,kim,2025-02-11,21:45:00,-08:00,2025-02-11T21:45:00-08:00,1,18
"""


@pytest.fixture()
def sample_csv(tmp_path):
    path = tmp_path / "loc.csv"
    path.write_text(SAMPLE_CSV)
    return path

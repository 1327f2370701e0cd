"""Pillow renderer: draws each dashboard view to its own PNG.

Images are kept in memory until ``flush()`` writes them to the output
directory, so a burst of state changes only writes the final frame.
"""

import logging
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from commitscope.config import Config
from commitscope.models import Commit, DailyTotal, FileGrowth, FileUnit, Stage, Stats
from commitscope.output.base import Renderer
from commitscope.scales import HOURS_IN_DAY, LinearScale, PlotArea, PlotScales

logger = logging.getLogger(__name__)

# --- Colors ---

BG = (13, 17, 23)
CARD_BG = (22, 27, 34)
TEXT = (230, 237, 243)
TEXT_DIM = (110, 118, 129)
DIVIDER = (48, 54, 61)
DOT = (70, 130, 180)
SELECTED = (255, 107, 107)
AVERAGE = (255, 92, 51)

# Tableau-like categorical palette for file types and dates
PALETTE = [
    (78, 121, 167),
    (242, 142, 43),
    (225, 87, 89),
    (118, 183, 178),
    (89, 161, 79),
    (237, 201, 72),
    (176, 122, 161),
    (255, 157, 167),
    (156, 117, 95),
    (186, 176, 172),
]

# Bar color ramp (0 -> max)
BLUES = [
    (198, 219, 239),
    (158, 202, 225),
    (107, 174, 214),
    (66, 146, 198),
    (33, 113, 181),
    (8, 69, 148),
]


def _ramp(value: float) -> tuple[int, int, int]:
    """Map 0.0-1.0 onto the blue ramp."""
    idx = min(int(max(value, 0) * len(BLUES)), len(BLUES) - 1)
    return BLUES[idx]


class PillowRenderer(Renderer):
    """Render views as PNG files under ``output_dir``."""

    def __init__(self, output_dir: Path, config: Config) -> None:
        self.output_dir = output_dir
        self.config = config
        self.targets = set(config.render.targets)
        self.images: dict[str, Image.Image] = {}

    # --- Fonts ---

    def _font(self, size: int, bold: bool = False) -> ImageFont.ImageFont:
        path = self.config.render.font_bold if bold else self.config.render.font_regular
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            return ImageFont.load_default()

    def _canvas(self, target: str, width: int, height: int, title: str) -> ImageDraw.ImageDraw:
        img = Image.new("RGB", (width, height), BG)
        self.images[target] = img
        draw = ImageDraw.Draw(img)
        bbox = draw.textbbox((0, 0), title, font=self._font(16, bold=True))
        draw.text(((width - (bbox[2] - bbox[0])) // 2, 12), title, font=self._font(16, bold=True), fill=TEXT)
        return draw

    # --- Renderer interface ---

    def has_target(self, target: str) -> bool:
        return target in self.targets

    def draw_scatter(
        self,
        commits: Sequence[Commit],
        scales: PlotScales | None,
        selected_ids: set[str],
        stats: Stats,
    ) -> None:
        plot = self.config.plot
        panel_w = 260
        draw = self._canvas("scatter", plot.width + panel_w, plot.height, "Commits by Time of Day")
        area = PlotArea.from_config(plot)

        # Hour gridlines
        for hour in range(0, HOURS_IN_DAY + 1, 2):
            y = LinearScale((0, HOURS_IN_DAY), (area.bottom, area.top))(hour)
            draw.line([(area.left, y), (area.right, y)], fill=DIVIDER, width=1)
            draw.text((area.left - 48, y - 7), f"{hour % 24:02d}:00", font=self._font(11), fill=TEXT_DIM)

        if scales is not None:
            start, end = scales.x.domain
            draw.text((area.left, area.bottom + 10), start.date().isoformat(), font=self._font(11), fill=TEXT_DIM)
            label = end.date().isoformat()
            bbox = draw.textbbox((0, 0), label, font=self._font(11))
            draw.text((area.right - (bbox[2] - bbox[0]), area.bottom + 10), label, font=self._font(11), fill=TEXT_DIM)

            for c in commits:
                x, y = scales.project(c)
                r = scales.r(c.total_lines)
                color = SELECTED if c.id in selected_ids else DOT
                draw.ellipse((x - r, y - r, x + r, y + r), fill=color, outline=BG)

        # Stats panel
        px = plot.width + 10
        y = 60
        n_selected = len(selected_ids)
        rows = [
            ("Total LOC", f"{stats.total_lines:,}"),
            ("Commits Displayed", str(stats.commit_count)),
            ("Files Modified", str(stats.file_count)),
            ("Longest File (LOC)", str(stats.longest_file_lines)),
            ("Avg. Lines per Commit", str(stats.avg_lines_per_commit)),
        ]
        for label, value in rows:
            draw.text((px, y), label, font=self._font(11), fill=TEXT_DIM)
            draw.text((px, y + 14), value, font=self._font(22, bold=True), fill=TEXT)
            y += 52
        draw.text((px, y + 8), f"{n_selected or 'No'} commits selected", font=self._font(12), fill=SELECTED)

    def draw_breakdown(self, stats: Stats) -> None:
        rows = max(len(stats.language_breakdown), 1)
        draw = self._canvas("breakdown", 480, 60 + rows * 28, "Lines by File Type")
        if not stats.has_language_data:
            draw.text((20, 50), "No language data", font=self._font(13), fill=TEXT_DIM)
            return

        y = 50
        for i, (file_type, share) in enumerate(stats.language_breakdown.items()):
            color = PALETTE[i % len(PALETTE)]
            draw.text((20, y), file_type, font=self._font(13, bold=True), fill=color)
            bar_px = max(4, int(200 * share.percent / 100))
            draw.rounded_rectangle((120, y + 2, 120 + bar_px, y + 16), radius=3, fill=color)
            draw.text((330, y), f"{share.count} ({share.percent:.1f}%)", font=self._font(12), fill=TEXT)
            y += 28

    def draw_daily_bars(self, daily: Sequence[DailyTotal]) -> None:
        width, height = 900, 500
        draw = self._canvas("daily-bars", width, height, "Lines of Code Changed Per Day")
        if not daily:
            draw.text((40, height // 2), "No data available for the selected time period",
                      font=self._font(13), fill=TEXT_DIM)
            return

        area = PlotArea(top=40, right=width - 40, bottom=height - 60, left=60)
        peak = max(d.line_count for d in daily)
        y_scale = LinearScale((0, peak * 1.1), (area.bottom, area.top))
        band = area.width / len(daily)
        for i, d in enumerate(daily):
            x0 = area.left + i * band + band * 0.05
            x1 = area.left + (i + 1) * band - band * 0.05
            draw.rectangle((x0, y_scale(d.line_count), x1, area.bottom), fill=_ramp(d.line_count / peak), outline=DIVIDER)
            if d.line_count > peak / 5:
                draw.text((x0, y_scale(d.line_count) - 14), str(d.line_count), font=self._font(9, bold=True), fill=TEXT)
            if len(daily) <= 31 or i % (len(daily) // 15 + 1) == 0:
                draw.text((x0, area.bottom + 6), d.date.strftime("%b %d"), font=self._font(9), fill=TEXT_DIM)

        average = sum(d.line_count for d in daily) / len(daily)
        y = y_scale(average)
        draw.line([(area.left, y), (area.right, y)], fill=AVERAGE, width=2)
        draw.text((area.left + 10, y - 16), f"Avg: {round(average)} lines", font=self._font(12, bold=True), fill=AVERAGE)

    def draw_file_units(self, units: Sequence[FileUnit]) -> None:
        per_row, unit, gap = 60, 8, 2
        rows = sum((u.line_count + per_row - 1) // per_row for u in units)
        height = 50 + len(units) * 22 + rows * (unit + gap) + 10
        draw = self._canvas("file-units", 320 + per_row * (unit + gap), max(height, 80), "Files by Size")

        type_colors: dict[str, tuple[int, int, int]] = {}
        y = 44
        for u in units:
            draw.text((16, y), u.name[:40], font=self._font(11), fill=TEXT)
            draw.text((16, y + 13), f"{u.line_count} lines", font=self._font(9), fill=TEXT_DIM)
            for i, line in enumerate(u.lines):
                color = type_colors.setdefault(line.file_type, PALETTE[len(type_colors) % len(PALETTE)])
                ux = 320 + (i % per_row) * (unit + gap)
                uy = y + (i // per_row) * (unit + gap)
                draw.rectangle((ux, uy, ux + unit, uy + unit), fill=color)
            y += max(22, ((u.line_count + per_row - 1) // per_row) * (unit + gap) + 4)

    def draw_file_growth(self, growth: FileGrowth, stage: Stage) -> None:
        width, height = 600, 500
        draw = self._canvas("file-growth", width, height, "Lines Changed Per File")
        area = PlotArea(top=60, right=width - 140, bottom=height - 120, left=60)

        if growth.files:
            peak = max(col.total for col in growth.files)
            y_scale = LinearScale((0, peak * 1.1), (area.bottom, area.top))
            band = area.width / len(growth.files)
            date_colors = {d: PALETTE[i % len(PALETTE)] for i, d in enumerate(growth.dates)}
            for i, col in enumerate(growth.files):
                x0 = area.left + i * band + band * 0.1
                x1 = area.left + (i + 1) * band - band * 0.1
                for seg in col.segments:
                    draw.rectangle((x0, y_scale(seg.y1), x1, y_scale(seg.y0)), fill=date_colors[seg.date], outline=BG)

            # Legend, thinned to about ten dates
            step = -(-len(growth.dates) // 10) if len(growth.dates) > 10 else 1
            ly = area.top
            draw.text((area.right + 20, ly - 20), "Dates:", font=self._font(12, bold=True), fill=TEXT)
            for d in growth.dates[::step]:
                draw.rectangle((area.right + 20, ly, area.right + 35, ly + 15), fill=date_colors[d])
                draw.text((area.right + 40, ly), f"{d.month}/{d.day}", font=self._font(11), fill=TEXT_DIM)
                ly += 20

        progress = (
            f"{stage.value}: showing {growth.days_shown} out of {growth.total_days} days "
            f"({growth.percent_shown}%)"
        )
        draw.text((area.left, height - 24), progress, font=self._font(13), fill=TEXT_DIM)

    def draw_narration_slice(
        self,
        commits: Sequence[Commit],
        start_index: int,
        captions: Sequence[str],
        target: str = "narration",
    ) -> None:
        item_h = 70
        title = "Commit History" if target == "narration" else "Codebase Evolution"
        draw = self._canvas(target, 900, 50 + max(len(captions), 1) * item_h, title)
        y = 44
        for offset, caption in enumerate(captions):
            draw.text((16, y), f"#{start_index + offset + 1}", font=self._font(12, bold=True), fill=PALETTE[0])
            for j, chunk in enumerate(_wrap(caption, 110)[:3]):
                draw.text((60, y + j * 16), chunk, font=self._font(12), fill=TEXT)
            y += item_h

    def draw_message(self, text: str) -> None:
        self.images = {}
        draw = self._canvas("message", 600, 120, "commitscope")
        draw.text((20, 60), text, font=self._font(16), fill=TEXT)

    def flush(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for target, img in self.images.items():
            path = self.output_dir / f"{target}.png"
            img.save(str(path))
            logger.debug("Wrote %s", path)
        logger.info("Wrote %d views to %s", len(self.images), self.output_dir)


def _wrap(text: str, width: int) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in text.split():
        if current and len(current) + 1 + len(word) > width:
            lines.append(current)
            current = word
        else:
            current = f"{current} {word}".strip()
    if current:
        lines.append(current)
    return lines

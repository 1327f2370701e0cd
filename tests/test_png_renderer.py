"""Smoke tests for the Pillow renderer."""

import io

from PIL import Image

from commitscope.config import Config, RenderConfig
from commitscope.engine import open_dashboard
from commitscope.output.png_renderer import PillowRenderer, _ramp, _wrap

from conftest import SAMPLE_CSV


class TestPillowRenderer:
    def test_writes_every_view(self, tmp_path, config):
        renderer = PillowRenderer(tmp_path, config)
        dashboard = open_dashboard(io.StringIO(SAMPLE_CSV), renderer, config)
        dashboard.on_brush([70, 40, 1060, 640])
        dashboard.on_stage_entered("complete")
        renderer.flush()

        written = sorted(p.stem for p in tmp_path.glob("*.png"))
        assert written == sorted(config.render.targets)
        with Image.open(tmp_path / "scatter.png") as img:
            assert img.size == (config.plot.width + 260, config.plot.height)

    def test_unlisted_targets_are_missing(self, tmp_path):
        config = Config(render=RenderConfig(targets=["scatter"]))
        renderer = PillowRenderer(tmp_path, config)
        open_dashboard(io.StringIO(SAMPLE_CSV), renderer, config)
        renderer.flush()
        assert [p.name for p in tmp_path.glob("*.png")] == ["scatter.png"]

    def test_empty_views_still_draw(self, tmp_path, config):
        renderer = PillowRenderer(tmp_path, config)
        dashboard = open_dashboard(io.StringIO(SAMPLE_CSV), renderer, config)
        dashboard.state.set_max_timestamp(dashboard.commits[0].timestamp.replace(year=2000))
        assert set(renderer.images) >= {"scatter", "daily-bars", "file-units", "file-growth"}

    def test_message_replaces_views(self, tmp_path, config):
        renderer = PillowRenderer(tmp_path, config)
        header = SAMPLE_CSV.splitlines()[0] + "\n"
        assert open_dashboard(io.StringIO(header), renderer, config) is None
        renderer.flush()
        assert [p.name for p in tmp_path.glob("*.png")] == ["message.png"]

    def test_missing_font_falls_back(self, tmp_path):
        config = Config(render=RenderConfig(font_regular="/nonexistent.ttf", font_bold="/nonexistent.ttf"))
        renderer = PillowRenderer(tmp_path, config)
        renderer.draw_message("hello")
        assert "message" in renderer.images


def test_wrap():
    assert _wrap("one two three four", 9) == ["one two", "three", "four"]
    assert _wrap("", 10) == []


def test_ramp_bounds():
    assert _ramp(0.0) != _ramp(1.0)
    assert _ramp(5.0) == _ramp(1.0)

"""Tests for config loading."""

from pathlib import Path

from commitscope.config import Config, load_config
from commitscope.models import Stage


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == Config()
        assert config.scroll.item_height == 150
        assert config.scroll.stages[Stage.MID].fraction == 0.60

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "data_path: /data/loc.csv\n"
            "display_timezone: America/Los_Angeles\n"
            "plot:\n"
            "  width: 800\n"
            "scroll:\n"
            "  window_size: 5\n"
            "  stages:\n"
            "    intro: {fraction: 0.1, minimum: 2}\n"
        )
        config = load_config(path)
        assert config.plot.width == 800
        assert config.plot.height == 700
        assert config.scroll.window_size == 5
        assert config.scroll.stages[Stage.INTRO].minimum == 2
        assert config.display_timezone == "America/Los_Angeles"
        assert config.resolved_data_path == Path("/data/loc.csv")

    def test_relative_data_path_resolves_to_project_root(self):
        assert Config().resolved_data_path.name == "loc.csv"
        assert Config().resolved_data_path.is_absolute()

    def test_partial_stages_keep_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("scroll:\n  stages:\n    late: {fraction: 0.9}\n")
        stages = load_config(path).scroll.stages
        assert stages[Stage.LATE].fraction == 0.9
        assert stages[Stage.EARLY].minimum == 2
        assert list(stages) == list(Stage)

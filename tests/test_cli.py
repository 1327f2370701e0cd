"""Tests for the command line entry point."""

import sys

import pytest

from commitscope.cli import main

from conftest import SAMPLE_CSV


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["commitscope", *argv])
    main()


class TestStatsCommand:
    def test_prints_summary(self, monkeypatch, capsys, sample_csv, tmp_path):
        _run(monkeypatch, "--config", str(tmp_path / "none.yaml"), "stats", str(sample_csv))
        out = capsys.readouterr().out
        assert "Commits:                2" in out
        assert "js: 2 (50.0%)" in out

    def test_commit_and_daily(self, monkeypatch, capsys, sample_csv, tmp_path):
        _run(
            monkeypatch, "--config", str(tmp_path / "none.yaml"),
            "stats", str(sample_csv), "--commit", "e4f5a6b", "--daily", "weekend-vs-weekday",
        )
        out = capsys.readouterr().out
        assert "Total LOC:              1" in out
        assert "2025-02-11: 1 commits, 1 files, 1 lines [css]" in out
        assert "Weekdays: 1 commits over 1 days" in out

    def test_load_error_exits_1(self, monkeypatch, capsys, tmp_path):
        bad = tmp_path / "bad.csv"
        bad.write_text(SAMPLE_CSV.replace(",0,22", ",zero,22"))
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--config", str(tmp_path / "none.yaml"), "stats", str(bad))
        assert exc.value.code == 1
        assert "row 1" in capsys.readouterr().err


    def test_unknown_commit_exits_1(self, monkeypatch, capsys, sample_csv, tmp_path):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--config", str(tmp_path / "none.yaml"), "stats", str(sample_csv), "--commit", "nope")
        assert exc.value.code == 1
        assert "Unknown commit id 'nope'" in capsys.readouterr().err

    def test_undecodable_dataset_exits_1(self, monkeypatch, capsys, tmp_path):
        bad = tmp_path / "bad.csv"
        bad.write_bytes(SAMPLE_CSV.encode().replace(b",kim,", b",\xff\xfe,", 1))
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--config", str(tmp_path / "none.yaml"), "stats", str(bad))
        assert exc.value.code == 1
        assert "Could not load commit history" in capsys.readouterr().err


class TestRenderCommand:
    def test_writes_pngs(self, monkeypatch, capsys, sample_csv, tmp_path):
        out_dir = tmp_path / "out"
        _run(
            monkeypatch, "--config", str(tmp_path / "none.yaml"),
            "render", str(sample_csv), "--slider", "100", "--stage", "late", "-o", str(out_dir),
        )
        assert (out_dir / "scatter.png").exists()
        assert (out_dir / "file-growth.png").exists()
        assert "Commits:                2" in capsys.readouterr().out

    def test_unknown_commit_exits_1(self, monkeypatch, capsys, sample_csv, tmp_path):
        with pytest.raises(SystemExit) as exc:
            _run(
                monkeypatch, "--config", str(tmp_path / "none.yaml"),
                "render", str(sample_csv), "--commit", "nope", "-o", str(tmp_path / "out"),
            )
        assert exc.value.code == 1
        assert "Unknown commit id" in capsys.readouterr().err

    def test_empty_dataset(self, monkeypatch, capsys, tmp_path):
        empty = tmp_path / "empty.csv"
        empty.write_text(SAMPLE_CSV.splitlines()[0] + "\n")
        out_dir = tmp_path / "out"
        _run(monkeypatch, "--config", str(tmp_path / "none.yaml"), "render", str(empty), "-o", str(out_dir))
        assert [p.name for p in out_dir.glob("*.png")] == ["message.png"]


class TestReplayCommand:
    def test_replays_events(self, monkeypatch, capsys, sample_csv, tmp_path):
        events = tmp_path / "events.yaml"
        events.write_text("- {event: stage, value: mid}\n- {event: dropdown, value: a1b2c3d}\n")
        _run(
            monkeypatch, "--config", str(tmp_path / "none.yaml"),
            "replay", str(events), str(sample_csv), "-o", str(tmp_path / "out"),
        )
        assert "Replayed 2 events; stage: mid" in capsys.readouterr().out

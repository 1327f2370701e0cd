"""CLI entry point for commitscope."""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import yaml

from commitscope.config import Config, load_config
from commitscope.engine import load_commits, open_dashboard, replay_events
from commitscope.errors import EmptyDatasetError, LoadError
from commitscope.extractors.git_extractor import GitLineExtractor
from commitscope.models import BrushRect, Commit, DailyMode, Stats
from commitscope.output.png_renderer import PillowRenderer
from commitscope.scales import PlotArea
from commitscope.state import FilterState
from commitscope.stats import daily_activity, summarize, weekday_weekend_split
from commitscope.store import write_line_records


def _print_stats(stats: Stats) -> None:
    print(f"Total LOC:              {stats.total_lines:,}")
    print(f"Commits:                {stats.commit_count}")
    print(f"Files modified:         {stats.file_count}")
    print(f"Longest file (LOC):     {stats.longest_file_lines}")
    print(f"Avg. lines per commit:  {stats.avg_lines_per_commit}")
    if not stats.has_language_data:
        print("\nNo language data")
        return
    print(f"\nFile types ({len(stats.language_breakdown)}):")
    for file_type, share in stats.language_breakdown.items():
        print(f"  {file_type}: {share.count} ({share.percent:.1f}%)")


def _print_daily(commits: Sequence[Commit], mode: DailyMode) -> None:
    days = daily_activity(commits, mode)
    print(f"\nDaily activity ({mode.value}):")
    for d in days:
        weekend = " (weekend)" if d.is_weekend else ""
        print(
            f"  {d.day.isoformat()}{weekend}: {d.commit_count} commits, "
            f"{d.file_count} files, {d.line_count} lines [{', '.join(d.file_types)}]"
        )
    if mode == DailyMode.WEEKEND_VS_WEEKDAY:
        for bucket in weekday_weekend_split(days):
            print(f"  {bucket.label}: {bucket.commits} commits over {bucket.days} days ({bucket.commits_per_day:.1f}/day)")


def _parse_brush(raw: str) -> BrushRect:
    try:
        x0, y0, x1, y1 = (float(v) for v in raw.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError("brush must be x0,y0,x1,y1") from None
    return BrushRect(x0=x0, y0=y0, x1=x1, y1=y1)


def _parse_until(raw: str) -> datetime:
    ts = datetime.fromisoformat(raw)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _data_path(args: argparse.Namespace, config: Config) -> Path:
    return Path(args.csv) if args.csv else config.resolved_data_path


def main() -> None:
    parser = argparse.ArgumentParser(description="Commit history explorer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # extract command
    extract_parser = sub.add_parser("extract", help="Build the per-line dataset from a git repo")
    extract_parser.add_argument("repo", help="Path to the git repository")
    extract_parser.add_argument("-o", "--output", default="loc.csv", help="CSV file to write")
    extract_parser.add_argument("--since", default=None, help="Only commits after this ISO timestamp")

    # stats command
    stats_parser = sub.add_parser("stats", help="Print summary stats for the active commit set")
    stats_parser.add_argument("csv", nargs="?", help="Dataset CSV (defaults to config data_path)")
    stats_parser.add_argument("--until", type=_parse_until, default=None, help="Latest commit time to include")
    stats_parser.add_argument("--commit", default=None, help="Restrict to one commit id")
    stats_parser.add_argument(
        "--daily", choices=[m.value for m in DailyMode], default=None, help="Also print per-day activity",
    )

    # render command
    render_parser = sub.add_parser("render", help="Apply inputs and write every view as PNG")
    render_parser.add_argument("csv", nargs="?", help="Dataset CSV (defaults to config data_path)")
    render_parser.add_argument("--slider", type=float, default=None, help="Time slider position, 0-100")
    render_parser.add_argument("--brush", type=_parse_brush, default=None, help="Brush rectangle x0,y0,x1,y1")
    render_parser.add_argument("--commit", default=None, help="Dropdown commit id")
    render_parser.add_argument("--stage", default=None, help="Scroll stage (intro, early, mid, late, complete)")
    render_parser.add_argument("--scroll", type=float, default=None, help="Narration scroll offset in pixels")
    render_parser.add_argument("--evolution-scroll", type=float, default=None, help="File-evolution scroll offset")
    render_parser.add_argument("-o", "--output-dir", type=Path, default=None)

    # replay command
    replay_parser = sub.add_parser("replay", help="Replay a YAML list of input events")
    replay_parser.add_argument("events", type=Path, help="YAML file of {event, value} records")
    replay_parser.add_argument("csv", nargs="?", help="Dataset CSV (defaults to config data_path)")
    replay_parser.add_argument("-o", "--output-dir", type=Path, default=None)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        if args.command == "extract":
            records = GitLineExtractor(Path(args.repo).resolve()).extract(since=args.since)
            with open(args.output, "w", newline="", encoding="utf-8") as fh:
                count = write_line_records(records, fh)
            print(f"Wrote {count} line records to {args.output}")

        elif args.command == "stats":
            commits = load_commits(_data_path(args, config), config)
            state = FilterState(commits, PlotArea.from_config(config.plot))
            if args.until:
                state.set_max_timestamp(args.until)
            if args.commit:
                state.set_dropdown_commit(args.commit)
            snapshot = state.snapshot()
            _print_stats(summarize(snapshot.active_commits))
            if args.daily:
                _print_daily(snapshot.active_commits, DailyMode(args.daily))

        elif args.command == "render":
            renderer = PillowRenderer(args.output_dir or config.resolved_output_dir, config)
            dashboard = open_dashboard(_data_path(args, config), renderer, config)
            if dashboard is not None:
                if args.slider is not None:
                    dashboard.on_slider(args.slider)
                if args.commit:
                    dashboard.on_dropdown(args.commit)
                if args.brush is not None:
                    dashboard.on_brush(args.brush)
                if args.stage:
                    dashboard.on_stage_entered(args.stage)
                if args.scroll is not None:
                    dashboard.on_scroll(args.scroll)
                if args.evolution_scroll is not None:
                    dashboard.on_evolution_scroll(args.evolution_scroll)
                _print_stats(dashboard.pipeline.last_pass.stats)
            renderer.flush()
            print(f"Output: {renderer.output_dir}")

        elif args.command == "replay":
            events = yaml.safe_load(args.events.read_text()) or []
            renderer = PillowRenderer(args.output_dir or config.resolved_output_dir, config)
            dashboard = open_dashboard(_data_path(args, config), renderer, config)
            if dashboard is not None:
                replay_events(dashboard, events)
                print(f"Replayed {len(events)} events; stage: {dashboard.stage.value}")
            renderer.flush()
            print(f"Output: {renderer.output_dir}")

        else:
            parser.print_help()

    except EmptyDatasetError:
        print("No commit data.")
    except LoadError as e:
        print(f"Could not load commit history: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

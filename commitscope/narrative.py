"""Narration captions for the scrollytelling tracks."""

from collections import Counter
from typing import Sequence

from commitscope.models import Commit


def _files_touched(commit: Commit) -> Counter:
    return Counter(line.file for line in commit.lines)


def narrate_commit(commit: Commit, index: int) -> str:
    """Caption for one commit in the narration list; ``index`` is its global position."""
    ts = commit.timestamp
    when = f"{ts:%A, %B} {ts.day}, {ts:%Y} at {ts.hour % 12 or 12}:{ts:%M %p}"
    what = "my first commit, and it was glorious" if index == 0 else "another glorious commit"
    files = len(_files_touched(commit))
    return (
        f"On {when}, I made {what}. "
        f"I edited {commit.total_lines} lines across {files} {'file' if files == 1 else 'files'}."
    )


def narrate_file_evolution(
    commit: Commit,
    position: int,
    visible: Sequence[Commit],
    first_window: bool,
) -> str:
    """Caption for the file-evolution track.

    Args:
        commit: The commit being described.
        position: Its position within the current window.
        visible: Every commit from the start of history to the end of the window.
        first_window: Whether the window starts at the first commit.
    """
    verb = "begins" if position == 0 else "continues"
    parts = [f"{commit.timestamp.date().isoformat()}: This commit {verb} the evolution of the codebase."]

    touched = _files_touched(commit)
    if touched:
        name, count = touched.most_common(1)[0]
        parts.append(f"The file {name} saw the most changes with {count} lines modified.")

    unique = len({line.file for c in visible for line in c.lines})
    parts.append(
        f"At this point, the project contained {unique} unique {'file' if unique == 1 else 'files'} "
        "across all commits."
    )
    if position == 0 and first_window:
        parts.append("As you scroll down, you'll see how the codebase grows over time.")
    return " ".join(parts)

"""Extract per-line change records from git history using PyDriller."""

import logging
import signal
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from pydriller import Repository

from commitscope.extractors.base import BaseExtractor
from commitscope.models import LineRecord

logger = logging.getLogger(__name__)

REPO_TIMEOUT_SECONDS = 120
INDENT_WIDTH = 4


class _RepoTimeout(Exception):
    pass


def _timeout_handler(signum: int, frame: object) -> None:
    raise _RepoTimeout("Repository extraction timed out")


def file_type(path: str) -> str:
    """Extension without the dot, or the file name when there is none."""
    p = PurePosixPath(path)
    return p.suffix.lstrip(".") or p.name


def indent_depth(text: str, indent_width: int = INDENT_WIDTH) -> int:
    """Nesting depth from leading whitespace. A tab is one level."""
    depth = 0
    spaces = 0
    for ch in text:
        if ch == "\t":
            depth += 1
        elif ch == " ":
            spaces += 1
        else:
            break
    return depth + spaces // indent_width


def _lines_for_commit(commit: object) -> list[LineRecord]:
    """Build records for every added line of a commit.

    Per-file errors are logged and skipped; the rest of the commit is kept.
    """
    ts = commit.committer_date  # type: ignore[attr-defined]
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)

    records: list[LineRecord] = []
    for mf in commit.modified_files:  # type: ignore[attr-defined]
        try:
            path = mf.new_path
            if not path:
                continue  # deleted file, nothing added
            for line_number, text in mf.diff_parsed.get("added", []):
                records.append(LineRecord(
                    commit_id=commit.hash,  # type: ignore[attr-defined]
                    file=path,
                    line_number=line_number,
                    depth=indent_depth(text),
                    length=len(text.strip()),
                    file_type=file_type(path),
                    timestamp=ts,
                    author=commit.author.name,  # type: ignore[attr-defined]
                ))
        except _RepoTimeout:
            raise
        except Exception:
            logger.debug(
                "Skipping diff for file in commit (file-level error)",
                exc_info=True,
            )
    return records


class GitLineExtractor(BaseExtractor):
    """Extract one LineRecord per added line per commit from a git repository."""

    def __init__(self, project_path: Path, timeout: int = REPO_TIMEOUT_SECONDS) -> None:
        super().__init__(project_path)
        self.timeout = timeout

    def extract(self, since: str | None = None) -> list[LineRecord]:
        git_dir = self.project_path / ".git"
        if not git_dir.exists():
            logger.warning("No .git directory found at %s", self.project_path)
            return []

        kwargs: dict[str, object] = {"path_to_repo": str(self.project_path)}
        if since:
            kwargs["since"] = datetime.fromisoformat(since)

        records: list[LineRecord] = []
        commits_seen = 0
        old_handler = signal.signal(signal.SIGALRM, _timeout_handler)
        signal.alarm(self.timeout)
        try:
            for commit in Repository(**kwargs).traverse_commits():
                if commit.merge:
                    continue
                records.extend(_lines_for_commit(commit))
                commits_seen += 1
        except _RepoTimeout:
            logger.warning(
                "Timed out after %ds extracting %s (got %d commits so far)",
                self.timeout, self.project_name, commits_seen,
            )
        except Exception:
            logger.exception("Error extracting git history from %s", self.project_path)
            raise
        finally:
            signal.alarm(0)
            signal.signal(signal.SIGALRM, old_handler)

        logger.info(
            "Extracted %d line records from %d commits in %s",
            len(records), commits_seen, self.project_name,
        )
        return records

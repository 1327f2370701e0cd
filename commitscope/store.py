"""Line record store: parse the per-line change dataset into LineRecords."""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, TextIO

from pydantic import ValidationError

from commitscope.errors import LoadError, ParseError
from commitscope.models import LineRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("commit", "author", "file", "type", "line", "depth", "length")
SPLIT_TIME_COLUMNS = ("date", "time", "timezone")


def load_line_records(source: str | Path | TextIO) -> list[LineRecord]:
    """Parse a CSV dataset into line records.

    Args:
        source: A path to a CSV file, or an open text stream.

    Returns:
        One LineRecord per data row, in file order.

    Raises:
        LoadError: The source cannot be read, is not UTF-8 CSV, or lacks
            required columns.
        ParseError: A row is missing a field or holds a non-numeric value
            where a number is expected. No partial dataset is returned.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            with path.open(newline="", encoding="utf-8") as fh:
                records = parse_rows(csv.DictReader(fh))
        except OSError as e:
            raise LoadError(f"cannot read {path}: {e}") from e
        except (UnicodeDecodeError, csv.Error) as e:
            raise LoadError(f"malformed dataset {path}: {e}") from e
        logger.info("Loaded %d line records from %s", len(records), path)
        return records

    try:
        records = parse_rows(csv.DictReader(source))
    except (UnicodeDecodeError, csv.Error) as e:
        raise LoadError(f"malformed dataset: {e}") from e
    logger.info("Loaded %d line records", len(records))
    return records


def parse_rows(reader: csv.DictReader) -> list[LineRecord]:
    """Parse every row of a DictReader. Fails on the first bad row."""
    columns = set(reader.fieldnames or [])
    missing = [c for c in REQUIRED_COLUMNS if c not in columns]
    if "datetime" not in columns and not set(SPLIT_TIME_COLUMNS) <= columns:
        missing.append("datetime")
    if missing:
        raise LoadError(f"dataset is missing columns: {', '.join(missing)}")

    records: list[LineRecord] = []
    for row_number, row in enumerate(reader, start=1):
        records.append(parse_row(row, row_number))
    return records


def parse_row(row: dict[str, str | None], row_number: int) -> LineRecord:
    """Parse one CSV row into a LineRecord."""
    for column in REQUIRED_COLUMNS:
        if row.get(column) is None or not str(row[column]).strip():
            raise ParseError(row_number, f"missing value for '{column}'")

    timestamp = parse_timestamp(row, row_number)

    try:
        return LineRecord(
            commit_id=row["commit"].strip(),
            author=row["author"].strip(),
            file=row["file"].strip(),
            file_type=row["type"].strip(),
            line_number=row["line"].strip(),
            depth=row["depth"].strip(),
            length=row["length"].strip(),
            timestamp=timestamp,
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ParseError(row_number, f"invalid value for {fields}") from e


def parse_timestamp(row: dict[str, str | None], row_number: int) -> datetime:
    """Read the commit instant from ``datetime`` or from date/time/timezone.

    Naive timestamps are taken as UTC.
    """
    raw = (row.get("datetime") or "").strip()
    if not raw:
        parts = [(row.get(c) or "").strip() for c in SPLIT_TIME_COLUMNS]
        if not all(parts[:2]):
            raise ParseError(row_number, "missing value for 'datetime'")
        raw = f"{parts[0]}T{parts[1]}{_normalize_offset(parts[2])}"

    try:
        ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as e:
        raise ParseError(row_number, f"unparseable timestamp {raw!r}") from e

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _normalize_offset(offset: str) -> str:
    """'-0800' -> '-08:00'; '' stays naive."""
    if len(offset) == 5 and offset[0] in "+-" and offset[1:].isdigit():
        return f"{offset[:3]}:{offset[3:]}"
    return offset


def write_line_records(records: Iterable[LineRecord], out: TextIO) -> int:
    """Write records in the same CSV layout the loader reads. Returns row count."""
    writer = csv.writer(out)
    writer.writerow(["commit", "author", "datetime", "file", "type", "line", "depth", "length"])
    count = 0
    for r in records:
        writer.writerow([
            r.commit_id, r.author, r.timestamp.isoformat(), r.file, r.file_type,
            r.line_number, r.depth, r.length,
        ])
        count += 1
    return count

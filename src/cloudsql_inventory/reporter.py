import contextlib
import os
import tempfile
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from .core import COLUMNS, CSV_FILENAME_TEMPLATE, MONTH_NAMES
from .errors import ReportError
from .schemas.sql import InstanceRecord


def csv_filename(now: datetime | None = None) -> str:
    """
    Report file name for the current month, e.g. cloudsql_version_March2025.csv.
    Month names are always English, independent of the locale.
    """
    now = now or datetime.now()
    month = MONTH_NAMES[now.month - 1]
    return CSV_FILENAME_TEMPLATE.format(month=month, year=now.year)


def to_dataframe(records: Sequence[InstanceRecord]) -> pd.DataFrame:
    return pd.DataFrame([r.as_row() for r in records], columns=COLUMNS, dtype=str)


def build_table(records: Sequence[InstanceRecord]) -> Table:
    table = Table()
    # Long IDs and names wrap onto extra lines instead of being cut with an ellipsis
    table.add_column(COLUMNS[0], style="cyan", overflow="fold")
    table.add_column(COLUMNS[1], style="bold green", overflow="fold")
    table.add_column(COLUMNS[2], overflow="fold")

    for r in records:
        table.add_row(*r.as_row())
    return table


def render_table(records: Sequence[InstanceRecord], console: Console) -> None:
    console.print(build_table(records))


def write_csv(records: Sequence[InstanceRecord], path: Path) -> Path:
    """
    Writes the header row then one row per record, UTF-8, comma-delimited.
    Raises ReportError if the file cannot be written; no partial file is kept.
    """
    df = to_dataframe(records)
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise ReportError(f"Failed to create CSV file {path}: {e}") from e

    # Written in full beside the target, then swapped in; an existing report
    # is only replaced by a complete one.
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            df.to_csv(f, index=False)
        tmp.chmod(0o644)
        os.replace(tmp, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise ReportError(f"Failed to create CSV file {path}: {e}") from e
    return path

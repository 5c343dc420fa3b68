import csv
from datetime import datetime

import pandas as pd
import pytest
from rich.console import Console

from cloudsql_inventory.errors import ReportError
from cloudsql_inventory.reporter import (
    build_table,
    csv_filename,
    render_table,
    write_csv,
)
from cloudsql_inventory.schemas.sql import InstanceRecord

RECORDS = [
    InstanceRecord(project_id="p1", name="orders-db", database_version="MYSQL_8_0"),
    InstanceRecord(project_id="p1", name="users-db", database_version="POSTGRES_15"),
    InstanceRecord(
        project_id="p3", name="legacy", database_version="SQLSERVER_2017_STANDARD"
    ),
]


def test_csv_filename():
    assert csv_filename(datetime(2025, 3, 14)) == "cloudsql_version_March2025.csv"
    assert csv_filename(datetime(2024, 12, 1)) == "cloudsql_version_December2024.csv"


def test_write_csv(tmp_path):
    path = tmp_path / "report.csv"

    write_csv(RECORDS, path)

    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Project ID", "Instance", "Database Version"]
    assert rows[1:] == [r.as_row() for r in RECORDS]


def test_write_csv_header_only(tmp_path):
    path = tmp_path / "report.csv"

    write_csv([], path)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["Project ID,Instance,Database Version"]


def test_write_csv_missing_directory(tmp_path):
    path = tmp_path / "missing" / "report.csv"

    with pytest.raises(ReportError):
        write_csv(RECORDS, path)
    assert not path.exists()


def test_write_csv_permission_denied_leaves_no_file(mocker, tmp_path):
    path = tmp_path / "report.csv"

    def _partial_write(self, target, **kwargs):
        target.write("Project ID,Inst")
        raise PermissionError("Permission denied")

    mocker.patch.object(pd.DataFrame, "to_csv", _partial_write)

    with pytest.raises(ReportError, match="Permission denied"):
        write_csv(RECORDS, path)
    assert not path.exists()
    assert list(tmp_path.iterdir()) == []


def test_write_csv_failed_rewrite_keeps_previous_report(mocker, tmp_path):
    path = tmp_path / "report.csv"
    write_csv(RECORDS, path)
    previous = path.read_text(encoding="utf-8")

    def _disk_full(self, target, **kwargs):
        target.write("Project ID,Inst")
        raise OSError(28, "No space left on device")

    mocker.patch.object(pd.DataFrame, "to_csv", _disk_full)

    with pytest.raises(ReportError, match="No space left on device"):
        write_csv(RECORDS[:1], path)

    assert path.read_text(encoding="utf-8") == previous
    assert list(tmp_path.iterdir()) == [path]


def test_write_csv_replaces_previous_report(tmp_path):
    path = tmp_path / "report.csv"
    write_csv(RECORDS, path)

    write_csv(RECORDS[:1], path)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["Project ID,Instance,Database Version", "p1,orders-db,MYSQL_8_0"]
    assert list(tmp_path.iterdir()) == [path]


def test_build_table_rows_match_records():
    table = build_table(RECORDS)

    assert [c.header for c in table.columns] == [
        "Project ID",
        "Instance",
        "Database Version",
    ]
    assert table.row_count == len(RECORDS)


def test_render_table():
    console = Console(record=True, width=120)

    render_table(RECORDS, console)

    text = console.export_text()
    assert "Project ID" in text
    assert "orders-db" in text
    assert "SQLSERVER_2017_STANDARD" in text


def test_render_empty_table():
    console = Console(record=True, width=120)

    render_table([], console)

    assert "Database Version" in console.export_text()


def _column_text(text, index):
    # Reassemble one column of the (single) body row from its folded lines
    parts = []
    for line in text.splitlines():
        if "│" in line:
            parts.append(line.split("│")[index].strip())
    return "".join(parts)


def test_render_table_keeps_long_values_whole():
    record = InstanceRecord(
        project_id="research-computing-shared-services-prod",
        name="analytics-warehouse-replica-us-central1-failover-secondary",
        database_version="SQLSERVER_2019_ENTERPRISE",
    )
    console = Console(record=True, width=80)

    render_table([record], console)

    text = console.export_text()
    assert "…" not in text
    assert _column_text(text, 1) == record.project_id
    assert _column_text(text, 2) == record.name
    assert _column_text(text, 3) == record.database_version

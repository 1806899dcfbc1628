# tests/dataloader/test_items_loader.py
import textwrap
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from rulecheck.dataloader.items_loader import ItemsLoader
from rulecheck.dataloader.types import LoadResult
from rulecheck.errors import ConfigError, DataError
from rulecheck.schemas.models import ValidatableItem


def _write_csv(tmp_path: Path, name: str, text: str) -> Path:
    """Helper: writes plain text CSV content into a temporary file."""
    p = tmp_path / name
    p.write_text(textwrap.dedent(text).strip() + "\n", encoding="utf-8")
    return p


# ------------------------------------------------------------------------------
# Happy path
# ------------------------------------------------------------------------------
def test_valid_csv_returns_success(tmp_path: Path):
    csv_path = _write_csv(
        tmp_path,
        "ok.csv",
        """
        id,title,start_date,end_date,duration_minutes,location,type,owner
        E001,Standup,2025-01-06T09:00:00,2025-01-06T09:15:00,,Office,meeting,ana
        E002,Focus,2025-01-06T10:00:00+01:00,,90,,work,
        E003,Report,,,45,,task,ben
        """,
    )

    result = ItemsLoader().load(csv_path)

    assert isinstance(result, LoadResult)
    assert result.success is True
    assert result.kept_rows == result.total_rows == 3
    assert all(isinstance(it, ValidatableItem) for it in result.items)
    # file order is kept
    assert [it.id for it in result.items] == ["E001", "E002", "E003"]

    standup, focus, report = result.items
    assert standup.location == "Office"
    assert standup.model_extra == {"owner": "ana"}
    assert standup.start_date.utcoffset() == timedelta(0)
    assert focus.duration_minutes == pytest.approx(90)
    assert focus.start_date.utcoffset() == timedelta(hours=1)
    assert focus.location is None
    assert focus.model_extra == {}
    assert report.start_date is None


def test_naive_timestamps_get_loader_timezone(tmp_path: Path):
    csv_path = _write_csv(
        tmp_path,
        "tz.csv",
        """
        id,start_date
        E001,2025-07-01T09:00:00
        """,
    )

    result = ItemsLoader(timezone="Europe/Berlin").load(csv_path)

    start = result.items[0].start_date
    assert start.utcoffset() == timedelta(hours=2)
    assert start.replace(tzinfo=None) == datetime(2025, 7, 1, 9, 0)


def test_unknown_timezone_raises_configerror():
    with pytest.raises(ConfigError):
        ItemsLoader(timezone="Mars/Olympus_Mons")


# ------------------------------------------------------------------------------
# Row-level issues (non-fatal but lead to success=False)
# ------------------------------------------------------------------------------
def test_row_issues_are_collected(tmp_path: Path):
    csv_path = _write_csv(
        tmp_path,
        "bad.csv",
        """
        id,start_date,end_date,duration_minutes
        E001,2025-01-01T07:00:00,2025-01-01T08:00:00,
        E001,2025-01-01T09:00:00,2025-01-01T10:00:00,
        E002,2025-01-01T11:00:00,2025-01-01T09:00:00,
        E003,not_a_date,,
        E004,,,ninety
        ,2025-01-01T07:00:00,,
        """,
    )

    result = ItemsLoader().load(csv_path)

    assert result.success is False
    assert result.items == []
    assert result.kept_rows == 0
    assert result.total_rows == 6
    assert [(e["kind"], e["line_no"], e["item_id"]) for e in result.errors] == [
        ("duplicate_id", 3, "E001"),
        ("negative_duration", 4, "E002"),
        ("invalid_datetime", 5, "E003"),
        ("invalid_duration", 6, "E004"),
        ("missing_id", 7, None),
    ]


def test_header_only_csv_is_empty_success(tmp_path: Path):
    csv_path = _write_csv(tmp_path, "empty.csv", "id,title")

    result = ItemsLoader().load(csv_path)

    assert result.success is True
    assert result.items == []
    assert result.total_rows == 0


# ------------------------------------------------------------------------------
# Fatal errors
# ------------------------------------------------------------------------------
def test_missing_file_raises_dataerror(tmp_path: Path):
    with pytest.raises(DataError) as e:
        ItemsLoader().load(tmp_path / "nope.csv")
    assert "not found" in str(e.value)


def test_non_path_argument_raises_dataerror(tmp_path: Path):
    with pytest.raises(DataError):
        ItemsLoader().load(str(tmp_path / "x.csv"))  # type: ignore[arg-type]


def test_missing_id_column_raises_dataerror(tmp_path: Path):
    csv_path = _write_csv(
        tmp_path,
        "noid.csv",
        """
        title,start_date
        Standup,2025-01-06T09:00:00
        """,
    )
    with pytest.raises(DataError) as e:
        ItemsLoader().load(csv_path)
    assert "missing required column" in str(e.value)


def test_empty_file_raises_dataerror(tmp_path: Path):
    path = tmp_path / "blank.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(DataError) as e:
        ItemsLoader().load(path)
    assert "no header" in str(e.value)


def test_repository_sample_loads():
    result = ItemsLoader().load(Path("data/input/sample_items.csv"))
    assert result.success is True
    assert result.kept_rows == 7

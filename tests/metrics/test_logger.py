from __future__ import annotations

import json
import os

import pytest

from rulecheck.errors import DataError
from rulecheck.metrics.logger import _utc_now_iso, atomic_write_text, write_stats
from rulecheck.schemas.models import ViolationStats

# --------------------------
# write_stats
# --------------------------


def test_write_stats_model_uses_camel_case_and_timestamp(tmp_path):
    """
    @brief
    Verifies that write_stats() dumps a ViolationStats model with camelCase keys.

    @details
    The written JSON carries every aggregate plus a generatedAt timestamp.
    """
    # --- Arrange ---
    stats = ViolationStats(
        total_violations=3,
        error_count=1,
        warning_count=2,
        by_category={"time": 2, "conflicts": 1},
        most_common_rule="buffer",
        affected_item_count=4,
    )

    # --- Act ---
    path = write_stats(stats, tmp_path / "out")
    obj = json.loads(path.read_text(encoding="utf-8"))

    # --- Assert ---
    assert path.name == "violation_stats.json"
    assert obj["totalViolations"] == 3
    assert obj["byCategory"] == {"time": 2, "conflicts": 1}
    assert obj["mostCommonRule"] == "buffer"
    assert "generatedAt" in obj


def test_write_stats_dict_overwrites(tmp_path):
    """
    @brief
    Verifies that write_stats() replaces the previous file content.
    """
    # --- Act ---
    p1 = write_stats({"a": 1, "generatedAt": "t1"}, tmp_path)
    p2 = write_stats({"b": 2, "generatedAt": "t2"}, tmp_path)

    # --- Assert ---
    assert p1 == p2
    assert json.loads(p2.read_text(encoding="utf-8")) == {"b": 2, "generatedAt": "t2"}


def test_write_stats_rejects_wrong_type(tmp_path):
    with pytest.raises(DataError) as ei:
        write_stats(["not", "a", "dict"], tmp_path)  # type: ignore[arg-type]
    assert "stats must be ViolationStats or dict" in str(ei.value)


def test_write_stats_non_serializable_raises(tmp_path):
    """
    @brief
    Ensures that non-serializable objects trigger DataError.
    """

    class Bad:
        pass

    with pytest.raises(DataError) as ei:
        write_stats({"ok": 1, "bad": Bad()}, tmp_path)
    msg = str(ei.value)
    assert "stats not JSON-serializable" in msg
    assert "metrics.write_stats" in msg


# --------------------------
# atomic_write_text
# --------------------------


def test_atomic_write_text_failure_raises_and_cleans_tmp(tmp_path, monkeypatch):
    """
    @brief
    Forces os.replace() to fail and verifies DataError and cleanup.

    @details
    Simulates a failure during atomic file replacement and checks
    that the temporary file is properly removed afterward.
    """
    target = tmp_path / "folder" / "file.txt"
    tmp_created = tmp_path / "folder" / "file.txt.tmp-for-test"

    # --- Arrange ---
    def fake_mkstemp(prefix, dir):
        os.makedirs(dir, exist_ok=True)
        tmp_created.write_text("", encoding="utf-8")
        fd = os.open(tmp_created, os.O_RDWR)
        return fd, str(tmp_created)

    monkeypatch.setattr("tempfile.mkstemp", fake_mkstemp)

    def boom_replace(src, dst):
        raise OSError("nope")

    monkeypatch.setattr(os, "replace", boom_replace)

    # --- Act & Assert ---
    with pytest.raises(DataError) as ei:
        atomic_write_text(target, "payload", encoding="utf-8")

    msg = str(ei.value)
    assert "atomic write failed" in msg
    assert "metrics.atomic_write_text" in msg
    assert not tmp_created.exists()


def test_atomic_write_text_encoding_failure_cleans_tmp(tmp_path):
    """
    @brief
    Unencodable text raises DataError and leaves no temp file behind.

    @details
    A lone surrogate cannot be encoded as UTF-8, so f.write() fails with
    UnicodeEncodeError before the rename.
    """
    # --- Arrange ---
    out_dir = tmp_path / "out"
    target = out_dir / "report.json"

    # --- Act ---
    with pytest.raises(DataError) as ei:
        atomic_write_text(target, '{"title": "\ud800"}', encoding="utf-8")

    # --- Assert ---
    assert "atomic write failed" in str(ei.value)
    assert isinstance(ei.value.__cause__, UnicodeEncodeError)
    assert list(out_dir.iterdir()) == []


def test_utc_now_iso_format():
    s = _utc_now_iso()
    assert s.endswith("+00:00")
    assert s[10] == "T"

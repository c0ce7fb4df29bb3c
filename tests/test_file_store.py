# tests/test_file_store.py
"""
File Store Tests - Unit Tests for Snapshot Reading and Idempotent Writes

This module tests snapshot parsing, deterministic artifact serialization and
the write-only-if-changed contract that downstream deploys rely on.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxhistory.adapters.persistence.file_store (read_snapshot, serialize_artifact, write_if_changed)
- fxhistory.domain.models (HistoryArtifact, RatePoint for test data)
- fxhistory.domain.errors (SnapshotParseError, ArtifactWriteError)
"""
import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from fxhistory.adapters.persistence.file_store import (
    read_snapshot,
    serialize_artifact,
    serialize_json,
    write_if_changed,
)
from fxhistory.domain.errors import ArtifactWriteError, SnapshotParseError
from fxhistory.domain.models import HistoryArtifact, RatePoint, date_to_epoch


class TestReadSnapshot:
    def test_valid_snapshot(self, tmp_path):
        path = tmp_path / "2024-01-10.json"
        path.write_text(json.dumps({"timestamp": 1704888000, "base": "USD", "rates": {"EUR": 0.91}}))

        snap = read_snapshot(path, date(2024, 1, 10))

        assert snap.date == date(2024, 1, 10)
        assert snap.timestamp == 1704888000
        assert snap.base == "USD"
        assert snap.rates == {"EUR": 0.91}

    def test_missing_fields_fall_back(self, tmp_path):
        path = tmp_path / "2024-01-10.json"
        path.write_text(json.dumps({"rates": "oops"}))

        snap = read_snapshot(path, date(2024, 1, 10))

        assert snap.timestamp is None
        assert snap.base is None
        assert snap.rates == {}
        assert snap.effective_timestamp == date_to_epoch(date(2024, 1, 10)) == 1704844800

    @pytest.mark.parametrize("content", [
        "{not json",
        "[1, 2, 3]",
        '{"rates": {"EUR": NaN}}',
        "",
    ])
    def test_unparsable_content(self, tmp_path, content):
        path = tmp_path / "2024-01-10.json"
        path.write_text(content)

        with pytest.raises(SnapshotParseError):
            read_snapshot(path, date(2024, 1, 10))

    def test_overflowing_timestamp_falls_back_to_file_date(self, tmp_path):
        path = tmp_path / "2024-01-10.json"
        path.write_text('{"timestamp": 1e999, "base": "USD", "rates": {"EUR": 0.91}}')

        snap = read_snapshot(path, date(2024, 1, 10))

        assert snap.timestamp is None
        assert snap.effective_timestamp == date_to_epoch(date(2024, 1, 10))
        assert snap.rates == {"EUR": 0.91}

    def test_deeply_nested_content(self, tmp_path):
        path = tmp_path / "2024-01-10.json"
        path.write_text("[" * 100000 + "]" * 100000)

        with pytest.raises(SnapshotParseError):
            read_snapshot(path, date(2024, 1, 10))

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotParseError, match="Failed to read"):
            read_snapshot(tmp_path / "2024-01-10.json", date(2024, 1, 10))


class TestSerializeArtifact:
    def test_compact_and_ordered(self):
        artifact = HistoryArtifact(
            timestamp=1704888000,
            base="USD",
            rates={
                "JPY": [RatePoint(date(2024, 1, 9), 144), RatePoint(date(2024, 1, 10), 145.5)],
                "EUR": [RatePoint(date(2024, 1, 10), 0.91)],
            },
        )

        text = serialize_artifact(artifact)

        assert text == (
            '{"timestamp":1704888000,"base":"USD","rates":{'
            '"EUR":[{"date":"2024-01-10","rate":0.91}],'
            '"JPY":[{"date":"2024-01-09","rate":144},{"date":"2024-01-10","rate":145.5}]}}'
        )

    def test_insertion_order_does_not_matter(self):
        points = [RatePoint(date(2024, 1, 10), 1.0)]
        a = HistoryArtifact(timestamp=1, base="USD", rates={"EUR": points, "GBP": points})
        b = HistoryArtifact(timestamp=1, base="USD", rates={"GBP": points, "EUR": points})
        assert serialize_artifact(a) == serialize_artifact(b)

    def test_non_ascii_kept(self):
        assert serialize_json({"IRR": "ریال"}) == '{"IRR":"ریال"}'


class TestWriteIfChanged:
    def test_new_file_is_written(self, tmp_path):
        path = tmp_path / "week.json"

        assert write_if_changed(path, '{"a":1}') is True
        assert path.read_text(encoding="utf-8") == '{"a":1}'

    def test_same_content_is_not_rewritten(self, tmp_path):
        path = tmp_path / "week.json"
        write_if_changed(path, '{"a":1}')

        with patch("fxhistory.adapters.persistence.file_store.os.replace") as mock_replace:
            assert write_if_changed(path, '{"a":1}') is False
            mock_replace.assert_not_called()

    def test_changed_content_is_written(self, tmp_path):
        path = tmp_path / "week.json"
        write_if_changed(path, '{"a":1}')

        assert write_if_changed(path, b'{"a":2}') is True
        assert path.read_bytes() == b'{"a":2}'

    def test_no_temporary_files_left(self, tmp_path):
        write_if_changed(tmp_path / "week.json", "x")
        write_if_changed(tmp_path / "week.json", "y")
        assert [p.name for p in tmp_path.iterdir()] == ["week.json"]

    def test_unreadable_existing_file_is_overwritten(self, tmp_path):
        path = tmp_path / "week.json"
        path.write_text("old", encoding="utf-8")

        with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            assert write_if_changed(path, "new") is True
        assert path.read_text(encoding="utf-8") == "new"

    def test_write_failure_raises(self, tmp_path):
        with pytest.raises(ArtifactWriteError, match="Failed to write"):
            write_if_changed(tmp_path / "missing-dir" / "week.json", "x")

    def test_failed_replace_cleans_up(self, tmp_path):
        path = tmp_path / "week.json"
        with patch("fxhistory.adapters.persistence.file_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(ArtifactWriteError):
                write_if_changed(path, "x")
        assert list(tmp_path.iterdir()) == []

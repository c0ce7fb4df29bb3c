# tests/test_file_index.py
"""
File Index Tests - Unit Tests for the Snapshot Store Index

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxhistory.adapters.persistence.file_index (build_file_index, parse_date_from_filename)
- fxhistory.domain.errors (SnapshotStoreError)
"""
import random
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from fxhistory.adapters.persistence.file_index import build_file_index, parse_date_from_filename
from fxhistory.domain.errors import SnapshotStoreError


class TestParseDateFromFilename:
    def test_valid_names(self):
        assert parse_date_from_filename("2024-01-10.json") == date(2024, 1, 10)
        assert parse_date_from_filename("2024-02-29.json") == date(2024, 2, 29)

    @pytest.mark.parametrize("name", [
        "2021-02-30.json",
        "2023-02-29.json",
        "2024-13-01.json",
        "2024-00-10.json",
        "0000-01-01.json",
    ])
    def test_impossible_dates(self, name):
        assert parse_date_from_filename(name) is None

    @pytest.mark.parametrize("name", [
        "data.json",
        "2024-1-10.json",
        "2024-01-10.json.bak",
        "2024-01-10.JSON",
        "x2024-01-10.json",
        "2024-01-10",
        ".2024-01-10.json.tmp",
    ])
    def test_non_matching_names(self, name):
        assert parse_date_from_filename(name) is None


class TestBuildFileIndex:
    def test_keeps_only_valid_snapshots(self, tmp_path):
        for name in ["2024-01-02.json", "2021-02-30.json", "notes.txt", "2024-01-01.json", "latest.json"]:
            (tmp_path / name).write_text("{}", encoding="utf-8")

        index = build_file_index(tmp_path)

        assert [(e.filename, e.date) for e in index] == [
            ("2024-01-01.json", date(2024, 1, 1)),
            ("2024-01-02.json", date(2024, 1, 2)),
        ]

    def test_sorted_for_any_creation_order(self, tmp_path):
        names = [f"2023-{m:02d}-{d:02d}.json" for m in (1, 6, 12) for d in (1, 15, 28)]
        random.Random(7).shuffle(names)
        for name in names:
            (tmp_path / name).write_text("{}", encoding="utf-8")

        index = build_file_index(tmp_path)

        dates = [e.date for e in index]
        assert dates == sorted(dates)
        assert len(index) == len(names)

    def test_missing_directory_is_empty(self, tmp_path):
        assert build_file_index(tmp_path / "does-not-exist") == []

    def test_unreadable_directory_raises(self, tmp_path):
        with patch.object(Path, "iterdir", side_effect=PermissionError("denied")):
            with pytest.raises(SnapshotStoreError, match="Cannot read snapshot directory"):
                build_file_index(tmp_path)

    def test_file_instead_of_directory_raises(self, tmp_path):
        not_a_dir = tmp_path / "data"
        not_a_dir.write_text("", encoding="utf-8")
        with pytest.raises(SnapshotStoreError):
            build_file_index(not_a_dir)

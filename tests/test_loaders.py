"""Tests for CSV and JSONL record loading in `dtree.loaders`."""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest_check import check

from dtree.exceptions import DataLoadError
from dtree.loaders import (
    LoadedRecords,
    parse_cell,
    read_csv_records,
    read_jsonl_records,
    read_records,
    require_target,
)


class TestParseCell:
    """Tests for `parse_cell`."""

    @pytest.mark.parametrize(
        ("cell", "expected"),
        [
            ("85", 85.0),
            ("-2.5", -2.5),
            (" 70", 70.0),
            ("true", True),
            ("false", False),
            ("True", "True"),
            ("sunny", "sunny"),
            ("", None),
            ("   ", None),
            (None, None),
        ],
    )
    def test_coerces_cell(self, cell: str | None, expected: object) -> None:
        """Cells become numbers, booleans, null, or stay text."""
        # Act
        value = parse_cell(cell)

        # Assert
        with check:
            assert value == expected
        with check:
            assert type(value) is type(expected)


class TestReadCsvRecords:
    """Tests for `read_csv_records`."""

    def test_reads_typed_rows_in_header_order(self, tmp_path: Path) -> None:
        """Each row becomes a record with coerced values."""
        # Arrange
        path = tmp_path / "weather.csv"
        path.write_text("Outlook,Humidity,Wind,Play\nsunny,85,false,no\nrain,,true,yes\n", encoding="utf-8")

        # Act
        loaded = read_csv_records(path)

        # Assert
        with check:
            assert loaded.columns == ["Outlook", "Humidity", "Wind", "Play"]
        with check:
            assert loaded.records == [
                {"Outlook": "sunny", "Humidity": 85.0, "Wind": False, "Play": "no"},
                {"Outlook": "rain", "Humidity": None, "Wind": True, "Play": "yes"},
            ]

    def test_column_may_mix_kinds(self, tmp_path: Path) -> None:
        """Cells are coerced independently of their column."""
        # Arrange
        path = tmp_path / "mixed.csv"
        path.write_text("x,y\n1,a\nhigh,b\n", encoding="utf-8")

        # Act
        loaded = read_csv_records(path)

        # Assert
        assert [record["x"] for record in loaded.records] == [1.0, "high"]

    def test_header_only_file_raises(self, tmp_path: Path) -> None:
        """A file without data rows cannot be trained on."""
        # Arrange
        path = tmp_path / "empty.csv"
        path.write_text("Outlook,Play\n", encoding="utf-8")

        # Act / Assert
        with pytest.raises(DataLoadError, match="no data rows") as exc_info:
            read_csv_records(path)
        assert exc_info.value.path == str(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Unreadable files are reported as load errors."""
        # Act / Assert
        with pytest.raises(DataLoadError, match="cannot read CSV file"):
            read_csv_records(tmp_path / "absent.csv")


class TestReadJsonlRecords:
    """Tests for `read_jsonl_records`."""

    def test_reads_records_and_key_union(self, tmp_path: Path) -> None:
        """Absent keys stay absent and columns are the union of keys in first-seen order."""
        # Arrange
        path = tmp_path / "weather.jsonl"
        path.write_text(
            '{"Outlook": "sunny", "Play": "no"}\n\n{"Wind": true, "Outlook": null, "Humidity": 90}\n',
            encoding="utf-8",
        )

        # Act
        loaded = read_jsonl_records(path)

        # Assert
        with check:
            assert loaded == LoadedRecords(
                records=[{"Outlook": "sunny", "Play": "no"}, {"Wind": True, "Outlook": None, "Humidity": 90}],
                columns=["Outlook", "Play", "Wind", "Humidity"],
            )
        with check:
            assert "Play" not in loaded.records[1]

    @pytest.mark.parametrize(
        ("content", "message", "line"),
        [
            ('{"a": 1}\n{broken\n', "invalid JSON on line 2", 2),
            ('[1, 2]\n', "line 1 is not a JSON object", 1),
            ('{"a": 1}\n\n{"b": {"c": 1}}\n', "line 3 has non-scalar values", 3),
        ],
    )
    def test_bad_lines_raise_with_line_number(self, tmp_path: Path, content: str, message: str, line: int) -> None:
        """Each malformed line is reported with its 1-based line number."""
        # Arrange
        path = tmp_path / "bad.jsonl"
        path.write_text(content, encoding="utf-8")

        # Act / Assert
        with pytest.raises(DataLoadError, match=message) as exc_info:
            read_jsonl_records(path)
        assert exc_info.value.line == line

    def test_blank_file_raises(self, tmp_path: Path) -> None:
        """A file with only blank lines holds no records."""
        # Arrange
        path = tmp_path / "blank.jsonl"
        path.write_text("\n  \n", encoding="utf-8")

        # Act / Assert
        with pytest.raises(DataLoadError, match="is empty"):
            read_jsonl_records(path)


class TestReadRecords:
    """Tests for format dispatch in `read_records`."""

    def test_format_is_case_insensitive(self, tmp_path: Path) -> None:
        """`JSONL` selects the JSON Lines reader."""
        # Arrange
        path = tmp_path / "rows.jsonl"
        path.write_text('{"a": "x"}\n', encoding="utf-8")

        # Act
        loaded = read_records(path, "JSONL")

        # Assert
        assert loaded.records == [{"a": "x"}]

    def test_unknown_format_raises(self, tmp_path: Path) -> None:
        """Only csv and jsonl are supported."""
        # Act / Assert
        with pytest.raises(DataLoadError, match="unknown format: parquet"):
            read_records(tmp_path / "rows.parquet", "parquet")


class TestRequireTarget:
    """Tests for `require_target`."""

    def test_all_rows_labelled(self) -> None:
        """Rows carrying the label pass, even with a null label."""
        # Act / Assert
        require_target([{"Play": "yes"}, {"Play": None}], "Play")

    def test_first_unlabelled_row_is_reported(self) -> None:
        """The 1-based row number of the first row without the label is named."""
        # Act / Assert
        with pytest.raises(DataLoadError, match="missing label 'Play' in row 2") as exc_info:
            require_target([{"Play": "yes"}, {"Outlook": "rain"}, {}], "Play")
        assert exc_info.value.line == 2

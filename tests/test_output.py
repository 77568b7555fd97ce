"""
Unit tests for output formatters.
"""

from __future__ import annotations

import csv
import io
import json

import pytest

from gradle_coords.exceptions import ConfigurationError
from gradle_coords.output import (
    CSVFormatter,
    JSONFormatter,
    OutputFormat,
    TextFormatter,
    get_formatter,
)
from gradle_coords.parser import ArtifactRecord

RECORDS = [
    ArtifactRecord("com.example", "alpha", "1.1"),
    ArtifactRecord("com.example", "beta", "2.0"),
]


def test_csv_formatter_writes_header_and_rows() -> None:
    assert CSVFormatter().format(RECORDS) == (
        "group,name,version\n"
        "com.example,alpha,1.1\n"
        "com.example,beta,2.0\n"
    )


def test_csv_formatter_with_no_records_writes_header_only() -> None:
    assert CSVFormatter().format([]) == "group,name,version\n"


def test_csv_formatter_quotes_special_characters() -> None:
    record = ArtifactRecord("com.example", 'we,"ird', "1.0\nbeta")
    output = CSVFormatter().format([record])
    rows = list(csv.reader(io.StringIO(output)))
    assert rows[1] == ["com.example", 'we,"ird', "1.0\nbeta"]
    assert '"we,""ird"' in output


def test_json_formatter_includes_statistics() -> None:
    statistics = {"total_artifacts": 2, "total_edges": 1, "direct_dependencies": 1, "max_depth": 1}
    data = json.loads(JSONFormatter().format(RECORDS, statistics))
    assert data["artifacts"] == [
        {"group": "com.example", "name": "alpha", "version": "1.1"},
        {"group": "com.example", "name": "beta", "version": "2.0"},
    ]
    assert data["total_artifacts"] == 2
    assert data["statistics"] == statistics


def test_json_formatter_omits_missing_statistics() -> None:
    assert "statistics" not in json.loads(JSONFormatter().format(RECORDS))


def test_text_formatter_numbers_records() -> None:
    output = TextFormatter().format(RECORDS, {"total_artifacts": 2, "direct_dependencies": 1, "max_depth": 1})
    assert "Total Artifacts: 2" in output
    assert "1. com.example:alpha:1.1" in output
    assert "2. com.example:beta:2.0" in output


@pytest.mark.parametrize(
    ("format_type", "formatter_class"),
    [
        ("csv", CSVFormatter),
        ("CSV", CSVFormatter),
        ("json", JSONFormatter),
        ("text", TextFormatter),
        (OutputFormat.CSV.value, CSVFormatter),
    ],
)
def test_get_formatter(format_type: str, formatter_class: type) -> None:
    assert isinstance(get_formatter(format_type), formatter_class)


def test_get_formatter_rejects_unknown_format() -> None:
    with pytest.raises(ConfigurationError, match="Supported formats: csv, json, text"):
        get_formatter("xml")

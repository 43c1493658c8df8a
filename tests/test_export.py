"""Tests for JSON/CSV export of resolution results."""

import csv
import json
from pathlib import Path

import pytest

from export import CSV_HEADERS, export_csv, export_json, infer_format
from resolution.models import Prebuilt, ResolutionResult, Unavailable
from resolution.platform import PlatformTag


@pytest.fixture
def results():
    tag = PlatformTag("linux", "x86_64")
    return [
        ResolutionResult(package="foo", os="linux", arch="x86_64",
                         outcome=Prebuilt(package="foo", version="1.0", tag=tag, location="https://e.com/b"),
                         path=Path("/cache/downloads/x--foo--1.0.x86_64_linux.bottle.tar.gz")),
        ResolutionResult(package="foo", os="linux", arch="arm64",
                         outcome=Unavailable("no prebuilt for linux/arm64")),
    ]


@pytest.mark.parametrize("path,explicit,expected", [
    ("out.csv", None, "csv"),
    ("out.CSV", None, "csv"),
    ("out.json", None, "json"),
    ("out.txt", None, "json"),
    ("out.csv", "json", "json"),
])
def test_infer_format(path, explicit, expected):
    assert infer_format(path, explicit) == expected


def test_export_json(results, tmp_path):
    path = tmp_path / "out.json"
    export_json(results, str(path))
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["tag"] == "x86_64_linux"
    assert data[0]["path"].endswith(".bottle.tar.gz")
    assert data[1]["path"] is None
    assert data[1]["reason"] == "no prebuilt for linux/arm64"


def test_export_csv(results, tmp_path):
    path = tmp_path / "out.csv"
    export_csv(results, str(path))
    with open(path, newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == CSV_HEADERS
    assert rows[2][CSV_HEADERS.index("outcome")] == "unavailable"


def test_unwritable_destination_exits(results, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        export_json(results, str(tmp_path / "missing" / "out.json"))
    assert excinfo.value.code == 1

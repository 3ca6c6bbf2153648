from __future__ import annotations

import json
from pathlib import Path

import pytest

from dockrel.core.result import Err, Ok
from dockrel.release.metadata import read_build_metadata

from ..fakes import VERSION_JSON


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_reads_labels(tmp_path: Path) -> None:
    result = read_build_metadata(_write(tmp_path / "version.json", VERSION_JSON))

    assert isinstance(result, Ok)
    labels = dict(result.value.labels())
    assert labels == {
        "browser": "HeadlessChrome/79.0.3945.0",
        "protocolVersion": "1.3",
        "v8Version": "7.9.317",
        "webkitVersion": "537.36 (@1a7c8a1c)",
        "debuggerVersion": "1a7c8a1c",
        "puppeteerVersion": "2.0.0",
    }


def test_missing_file(tmp_path: Path) -> None:
    result = read_build_metadata(tmp_path / "version.json")
    assert isinstance(result, Err)
    assert "file not found" in result.error.message


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "version.json"
    path.write_text("{not json", encoding="utf-8")

    result = read_build_metadata(path)

    assert isinstance(result, Err)
    assert "invalid JSON" in result.error.message


def test_top_level_must_be_object(tmp_path: Path) -> None:
    result = read_build_metadata(_write(tmp_path / "version.json", ["Browser"]))
    assert isinstance(result, Err)


@pytest.mark.parametrize("key", ["Browser", "V8-Version", "Puppeteer-Version"])
def test_missing_key(tmp_path: Path, key: str) -> None:
    payload = {k: v for k, v in VERSION_JSON.items() if k != key}

    result = read_build_metadata(_write(tmp_path / "version.json", payload))

    assert isinstance(result, Err)
    assert key in result.error.message
    assert "version.json" in str(result.error)


def test_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "version.json"
    path.write_bytes(b"\xff\xfe garbage")

    result = read_build_metadata(path)

    assert isinstance(result, Err)
    assert "invalid UTF-8" in result.error.message

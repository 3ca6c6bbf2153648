from __future__ import annotations

from pathlib import Path

from dockrel.core.result import Err, Ok, Result
from dockrel.core.structured import get_str, read_json_object
from dockrel.release.errors import MetadataError
from dockrel.release.model import BuildMetadata

# version.json key -> BuildMetadata field
_FIELDS: tuple[tuple[str, str], ...] = (
    ("Browser", "browser"),
    ("Protocol-Version", "protocol_version"),
    ("V8-Version", "v8_version"),
    ("WebKit-Version", "webkit_version"),
    ("Debugger-Version", "debugger_version"),
    ("Puppeteer-Version", "puppeteer_version"),
)


def read_build_metadata(path: Path) -> Result[BuildMetadata, MetadataError]:
    """Load image labels from the version descriptor written by post-install.

    Must be called after the install steps of each channel, since they
    rewrite the file.
    """
    loaded = read_json_object(path)
    if isinstance(loaded, Err):
        return Err(MetadataError(path=path, message=loaded.error))
    data = loaded.value

    values: dict[str, str] = {}
    missing: list[str] = []
    for key, attr in _FIELDS:
        value = get_str(data, key)
        if value is None:
            missing.append(key)
            continue
        values[attr] = value

    if missing:
        return Err(MetadataError(path=path, message=f"missing keys: {', '.join(missing)}"))

    return Ok(BuildMetadata(**values))

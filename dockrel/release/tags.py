"""Tag matrix derivation.

Given version ``1.2.3`` and channel ``chrome-stable`` the tag family is
``1.2.3-chrome-stable``, ``1.2-chrome-stable`` and ``1-chrome-stable``. These
strings double as git tag names, so the dot/dash format must not change.
"""

from __future__ import annotations

from collections.abc import Iterable

from dockrel.core.result import Err, Ok, Result
from dockrel.release.errors import ConfigurationError
from dockrel.release.model import DeployJob, SemanticVersion, TagSet

STABLE_MARKER = "chrome-stable"


def parse_version(text: str) -> Result[SemanticVersion, ConfigurationError]:
    parts = text.strip().split(".")
    if len(parts) != 3 or not all(parts):
        return Err(ConfigurationError(f"expected a major.minor.patch version, got {text!r}"))
    major, minor, patch = parts
    return Ok(SemanticVersion(major=major, minor=minor, patch=patch))


def build_tags(version: SemanticVersion, channel: str) -> TagSet:
    return TagSet(
        patch=f"{version.major}.{version.minor}.{version.patch}-{channel}",
        minor=f"{version.major}.{version.minor}-{channel}",
        major=f"{version.major}-{channel}",
    )


def build_matrix(version: SemanticVersion, channels: Iterable[str]) -> tuple[DeployJob, ...]:
    """One DeployJob per channel, in channel order."""
    return tuple(DeployJob(tags=build_tags(version, c), channel=c) for c in channels)


def is_stable_channel(tags: TagSet) -> bool:
    """True if the tag family targets the system-provided stable Chrome."""
    return STABLE_MARKER in tags.major

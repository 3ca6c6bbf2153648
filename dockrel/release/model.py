from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from dockrel.core.result import Recovered
from dockrel.platform.process import ExecutionError


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """Pinned browser engine for one release channel."""

    engine_version: str  # puppeteer package version
    engine_revision: str  # chromium revision


@dataclass(frozen=True, slots=True)
class SemanticVersion:
    major: str
    minor: str
    patch: str

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class TagSet:
    """Tags for one channel, most specific first."""

    patch: str
    minor: str
    major: str

    def __iter__(self) -> Iterator[str]:
        return iter((self.patch, self.minor, self.major))


@dataclass(frozen=True, slots=True)
class DeployJob:
    tags: TagSet
    channel: str


@dataclass(frozen=True, slots=True)
class BuildMetadata:
    """Labels stamped on the image, read from version.json after post-install."""

    browser: str
    protocol_version: str
    v8_version: str
    webkit_version: str
    debugger_version: str
    puppeteer_version: str

    def labels(self) -> tuple[tuple[str, str], ...]:
        return (
            ("browser", self.browser),
            ("protocolVersion", self.protocol_version),
            ("v8Version", self.v8_version),
            ("webkitVersion", self.webkit_version),
            ("debuggerVersion", self.debugger_version),
            ("puppeteerVersion", self.puppeteer_version),
        )


@dataclass(frozen=True, slots=True)
class DeployReport:
    """What a successful channel deploy did.

    Attributes:
        channel: Release channel that was deployed.
        images: Image references passed to ``docker build -t``.
        pushed: Image references that were pushed (empty in single-tag mode).
        recovered: Tolerated version-control failures, keyed by step name.
        workspace_reset: True if the workspace was reset afterwards.
    """

    channel: str
    images: tuple[str, ...]
    pushed: tuple[str, ...] = ()
    recovered: tuple[tuple[str, Recovered[ExecutionError]], ...] = ()
    workspace_reset: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseSummary:
    version: SemanticVersion
    reports: tuple[DeployReport, ...] = field(default_factory=tuple)
    skipped: tuple[str, ...] = ()

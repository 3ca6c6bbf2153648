"""Error types for the release pipeline.

``ExecutionError`` lives in ``dockrel.platform.process``; the types here cover
everything that is not a failed external command.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from dockrel.platform.process import ExecutionError


@dataclass(frozen=True, slots=True)
class MetadataError:
    """version.json is missing or malformed after post-install."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"invalid build metadata ({self.path.name}): {self.message}"


@dataclass(frozen=True, slots=True)
class ConfigurationError:
    """A channel cannot be deployed as configured (e.g. no engine info)."""

    message: str
    channel: str | None = None

    def __str__(self) -> str:
        if self.channel is not None:
            return f"channel {self.channel}: {self.message}"
        return self.message


type DeployError = ExecutionError | MetadataError | ConfigurationError


@dataclass(frozen=True, slots=True)
class ChannelFailure:
    """The first fatal error of a release, with the channel it happened on.

    Attributes:
        channel: Channel being deployed when the error occurred.
        step: Pipeline step name (install, post-install, metadata, build, ...).
        error: The underlying error.
    """

    channel: str
    step: str
    error: DeployError

    def __str__(self) -> str:
        return f"{self.channel} [{self.step}]: {self.error}"

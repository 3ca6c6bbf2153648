"""Release configuration.

Assembled once at start from two sources:

- ``package.json`` in the workspace root: ``version``, ``releaseVersions``
  (ordered channel list) and ``puppeteerVersions`` (channel -> engine pins).
- Environment variables ``REPO``, ``TAG_NAME``, ``BASE_IMAGE``, ``USER`` and
  ``SINGLE_VERSION``. CLI flags override them (see ``dockrel.cli``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from dockrel.core.result import Err, Ok, Result
from dockrel.core.structured import (
    StrDict,
    as_str_dict,
    get_list,
    get_str,
    get_table,
    read_json_object,
)
from dockrel.release.errors import ConfigurationError
from dockrel.release.model import SemanticVersion, VersionInfo
from dockrel.release.tags import parse_version

__all__ = [
    "ConfigError",
    "DEFAULT_REPO",
    "DEFAULT_USER",
    "ReleaseConfig",
    "ReleaseSettings",
    "load_release_config",
]

DEFAULT_REPO = "browserless/chrome"
DEFAULT_USER = "blessuser"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the release configuration cannot be loaded."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """Operator-supplied settings (environment, then CLI flags).

    Attributes:
        repo: Registry namespace images are tagged and pushed under.
        tag_name: Single-tag override. When set, the three-tag matrix is
            replaced by this one tag and nothing is pushed or git-tagged.
        base_image: ``BASE_IMAGE`` build argument (empty when unset).
        user: ``USER`` build argument.
        single_version: Restrict the release to this one channel.
    """

    repo: str = DEFAULT_REPO
    tag_name: str | None = None
    base_image: str = ""
    user: str = DEFAULT_USER
    single_version: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> ReleaseSettings:
        return cls(
            repo=environ.get("REPO") or DEFAULT_REPO,
            tag_name=environ.get("TAG_NAME") or None,
            base_image=environ.get("BASE_IMAGE") or "",
            user=environ.get("USER") or DEFAULT_USER,
            single_version=environ.get("SINGLE_VERSION") or None,
        )

    def with_overrides(
        self,
        *,
        repo: str | None = None,
        tag_name: str | None = None,
        base_image: str | None = None,
        user: str | None = None,
        single_version: str | None = None,
    ) -> ReleaseSettings:
        """Return a copy with every non-None argument applied."""
        return replace(
            self,
            repo=repo if repo is not None else self.repo,
            tag_name=tag_name if tag_name is not None else self.tag_name,
            base_image=base_image if base_image is not None else self.base_image,
            user=user if user is not None else self.user,
            single_version=single_version if single_version is not None else self.single_version,
        )


def _empty_engines() -> dict[str, VersionInfo]:
    return {}


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    version: SemanticVersion
    channels: tuple[str, ...]
    engines: Mapping[str, VersionInfo] = field(default_factory=_empty_engines)
    settings: ReleaseSettings = field(default_factory=ReleaseSettings)

    def version_info(self, channel: str) -> Result[VersionInfo, ConfigurationError]:
        info = self.engines.get(channel)
        if info is None:
            return Err(
                ConfigurationError("no puppeteer/chromeRevision entry in package.json", channel)
            )
        return Ok(info)


def load_release_config(
    manifest_path: Path,
    settings: ReleaseSettings | None = None,
) -> Result[ReleaseConfig, ConfigError]:
    """Load the release matrix from ``package.json``.

    Channel entries without complete engine info are left out of
    ``engines``; the deployer rejects such a channel before running anything
    for it, so the rest of the release is unaffected.
    """
    loaded = read_json_object(manifest_path)
    if isinstance(loaded, Err):
        return Err(ConfigError(loaded.error, manifest_path))
    data = loaded.value

    version_str = get_str(data, "version")
    if version_str is None:
        return Err(ConfigError("missing 'version'", manifest_path))
    parsed = parse_version(version_str)
    if isinstance(parsed, Err):
        return Err(ConfigError(parsed.error.message, manifest_path))

    raw_channels = get_list(data, "releaseVersions")
    if raw_channels is None:
        return Err(ConfigError("missing 'releaseVersions' list", manifest_path))
    channels: list[str] = []
    for item in raw_channels:
        if not isinstance(item, str) or not item.strip():
            return Err(ConfigError(f"invalid entry in 'releaseVersions': {item!r}", manifest_path))
        channels.append(item.strip())

    table = get_table(data, "puppeteerVersions") or {}

    return Ok(
        ReleaseConfig(
            version=parsed.value,
            channels=tuple(channels),
            engines=_parse_engines(table),
            settings=settings or ReleaseSettings(),
        )
    )


def _parse_engines(table: StrDict) -> dict[str, VersionInfo]:
    engines: dict[str, VersionInfo] = {}
    for channel, raw in table.items():
        entry = as_str_dict(raw)
        if entry is None:
            continue
        engine_version = get_str(entry, "puppeteer")
        engine_revision = get_str(entry, "chromeRevision")
        if engine_version is None or engine_revision is None:
            continue
        engines[channel.strip()] = VersionInfo(
            engine_version=engine_version, engine_revision=engine_revision
        )
    return engines

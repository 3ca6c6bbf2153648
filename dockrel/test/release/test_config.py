from __future__ import annotations

import json
from pathlib import Path

from dockrel.core.result import Err, Ok
from dockrel.release.config import (
    DEFAULT_REPO,
    DEFAULT_USER,
    ReleaseSettings,
    load_release_config,
)
from dockrel.release.model import SemanticVersion, VersionInfo


def _manifest(tmp_path: Path, **data: object) -> Path:
    payload: dict[str, object] = {
        "name": "browserless-chrome",
        "version": "1.2.3",
        "releaseVersions": ["71", "chrome-stable"],
        "puppeteerVersions": {
            "71": {"puppeteer": "1.11.0", "chromeRevision": "609904"},
            "chrome-stable": {"puppeteer": "1.20.0", "chromeRevision": 686378},
        },
    }
    payload.update(data)
    path = tmp_path / "package.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestReleaseSettings:
    def test_defaults_from_empty_env(self) -> None:
        settings = ReleaseSettings.from_env({})
        assert settings.repo == DEFAULT_REPO
        assert settings.user == DEFAULT_USER
        assert settings.tag_name is None
        assert settings.base_image == ""
        assert settings.single_version is None

    def test_from_env(self) -> None:
        settings = ReleaseSettings.from_env(
            {
                "REPO": "acme/chrome",
                "TAG_NAME": "dev",
                "BASE_IMAGE": "ubuntu:18.04",
                "USER": "ci",
                "SINGLE_VERSION": "72",
            }
        )
        assert settings == ReleaseSettings("acme/chrome", "dev", "ubuntu:18.04", "ci", "72")

    def test_empty_env_values_are_unset(self) -> None:
        settings = ReleaseSettings.from_env({"TAG_NAME": "", "SINGLE_VERSION": ""})
        assert settings.tag_name is None
        assert settings.single_version is None

    def test_overrides_only_apply_when_given(self) -> None:
        base = ReleaseSettings(repo="acme/chrome", user="ci")
        updated = base.with_overrides(tag_name="dev")
        assert updated.repo == "acme/chrome"
        assert updated.user == "ci"
        assert updated.tag_name == "dev"


class TestLoadReleaseConfig:
    def test_loads_manifest(self, tmp_path: Path) -> None:
        result = load_release_config(_manifest(tmp_path))

        assert isinstance(result, Ok)
        config = result.value
        assert config.version == SemanticVersion("1", "2", "3")
        assert config.channels == ("71", "chrome-stable")
        assert config.version_info("71") == Ok(VersionInfo("1.11.0", "609904"))
        # Numeric revisions are accepted.
        assert config.version_info("chrome-stable") == Ok(VersionInfo("1.20.0", "686378"))

    def test_keeps_settings(self, tmp_path: Path) -> None:
        settings = ReleaseSettings(repo="acme/chrome")
        result = load_release_config(_manifest(tmp_path), settings)
        assert isinstance(result, Ok)
        assert result.value.settings is settings

    def test_missing_manifest(self, tmp_path: Path) -> None:
        result = load_release_config(tmp_path / "package.json")
        assert isinstance(result, Err)
        assert result.error.path == tmp_path / "package.json"

    def test_bad_version(self, tmp_path: Path) -> None:
        result = load_release_config(_manifest(tmp_path, version="1.2"))
        assert isinstance(result, Err)
        assert "major.minor.patch" in result.error.message

    def test_missing_release_versions(self, tmp_path: Path) -> None:
        result = load_release_config(_manifest(tmp_path, releaseVersions=None))
        assert isinstance(result, Err)
        assert "releaseVersions" in result.error.message

    def test_invalid_channel_entry(self, tmp_path: Path) -> None:
        result = load_release_config(_manifest(tmp_path, releaseVersions=["71", 72]))
        assert isinstance(result, Err)

    def test_incomplete_engine_entry_is_deferred(self, tmp_path: Path) -> None:
        path = _manifest(
            tmp_path,
            releaseVersions=["71", "72"],
            puppeteerVersions={
                "71": {"puppeteer": "1.11.0", "chromeRevision": "609904"},
                "72": {"puppeteer": "1.12.0"},
            },
        )

        result = load_release_config(path)

        assert isinstance(result, Ok)
        missing = result.value.version_info("72")
        assert isinstance(missing, Err)
        assert missing.error.channel == "72"

    def test_channel_names_are_stripped_on_both_sides(self, tmp_path: Path) -> None:
        path = _manifest(
            tmp_path,
            releaseVersions=["71 ", "72"],
            puppeteerVersions={
                "71": {"puppeteer": "1.11.0", "chromeRevision": "609904"},
                " 72": {"puppeteer": "1.13.0", "chromeRevision": "624492"},
            },
        )

        result = load_release_config(path)

        assert isinstance(result, Ok)
        assert result.value.channels == ("71", "72")
        assert result.value.version_info("72") == Ok(
            VersionInfo(engine_version="1.13.0", engine_revision="624492")
        )
        assert isinstance(result.value.version_info("71"), Ok)

from __future__ import annotations

import os
from pathlib import Path

import typer

from dockrel.cli.context import build_context
from dockrel.core.errors import ErrorCode
from dockrel.core.result import Err
from dockrel.output.console import Style
from dockrel.release.config import ReleaseSettings
from dockrel.release.deployer import ChannelDeployer, image_refs
from dockrel.release.driver import ReleaseDriver
from dockrel.release.tags import build_matrix, is_stable_channel
from dockrel.release.workspace import DEFAULT_BASELINE

_WORKSPACE_OPT = typer.Option(
    None, "--workspace", "-w", help="Checkout to build from (default: $WORKSPACE_ROOT or cwd)."
)


def _settings(
    *,
    repo: str | None,
    tag_name: str | None,
    base_image: str | None,
    user: str | None,
    channel: str | None,
) -> ReleaseSettings:
    return ReleaseSettings.from_env(os.environ).with_overrides(
        repo=repo,
        tag_name=tag_name,
        base_image=base_image,
        user=user,
        single_version=channel,
    )


def deploy(
    workspace: Path | None = _WORKSPACE_OPT,
    channel: str | None = typer.Option(
        None, "--channel", "-c", help="Only release this channel ($SINGLE_VERSION)."
    ),
    repo: str | None = typer.Option(None, "--repo", help="Image repository ($REPO)."),
    tag_name: str | None = typer.Option(
        None, "--tag-name", help="Build a single local tag, skip push and git ($TAG_NAME)."
    ),
    base_image: str | None = typer.Option(None, "--base-image", help="$BASE_IMAGE build arg."),
    user: str | None = typer.Option(None, "--user", help="$USER build arg."),
    baseline: str = typer.Option(
        DEFAULT_BASELINE, "--baseline", help="Ref the checkout is reset to between channels."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show executed commands."),
) -> None:
    """Build and publish every release channel, one at a time."""
    settings = _settings(
        repo=repo, tag_name=tag_name, base_image=base_image, user=user, channel=channel
    )
    ctx = build_context(workspace=workspace, settings=settings, baseline=baseline, verbose=verbose)
    config = ctx.config

    jobs = build_matrix(config.version, config.channels)
    deployer = ChannelDeployer(ctx.executor, config, ctx.console)
    driver = ReleaseDriver(deployer, ctx.workspace, ctx.console)

    result = driver.run(config.version, jobs, selected_channel=settings.single_version)
    if isinstance(result, Err):
        ctx.console.error(f"Error in build ({config.version}): {result.error}")
        raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))

    summary = result.value
    ctx.console.success(
        f"release {summary.version}: {len(summary.reports)} channel(s) built"
    )


def plan(
    workspace: Path | None = _WORKSPACE_OPT,
    channel: str | None = typer.Option(None, "--channel", "-c", help="Only show this channel."),
    repo: str | None = typer.Option(None, "--repo", help="Image repository ($REPO)."),
    tag_name: str | None = typer.Option(None, "--tag-name", help="Single-tag override."),
) -> None:
    """Show the tag matrix without running anything."""
    settings = _settings(repo=repo, tag_name=tag_name, base_image=None, user=None, channel=channel)
    ctx = build_context(workspace=workspace, settings=settings)
    config = ctx.config
    console = ctx.console

    console.header(f"Release {config.version} ({config.settings.repo})")
    for job in build_matrix(config.version, config.channels):
        if settings.single_version and job.channel != settings.single_version:
            continue
        info = config.engines.get(job.channel)
        engine = (
            f"puppeteer {info.engine_version} / chromium r{info.engine_revision}"
            if info is not None
            else "missing engine info"
        )
        stable = " (chrome stable)" if is_stable_channel(job.tags) else ""
        console.print(f"{job.channel}: {engine}{stable}", Style.INFO)
        for image in image_refs(job.tags, config.settings):
            console.print(f"  {image}")

    if config.settings.tag_name:
        console.print("single-tag mode: images are not pushed or git-tagged", Style.WARNING)

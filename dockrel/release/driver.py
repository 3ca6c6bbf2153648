"""Sequential release over all channels.

Channels run strictly one after another: every channel reuses the same
checkout and ``node_modules``, and the next install may only start once the
previous channel's workspace reset has finished. The first failure ends the
release; there is no continue-on-error mode.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from dockrel.core.result import Err, Ok, Result
from dockrel.output.console import ConsoleProtocol
from dockrel.release.errors import ChannelFailure
from dockrel.release.model import DeployJob, DeployReport, ReleaseSummary, SemanticVersion
from dockrel.release.workspace import WorkspaceHandle


class Deployer(Protocol):
    def deploy(
        self, job: DeployJob, workspace: WorkspaceHandle
    ) -> Result[DeployReport, ChannelFailure]: ...


class ReleaseDriver:
    def __init__(
        self,
        deployer: Deployer,
        workspace: WorkspaceHandle,
        console: ConsoleProtocol,
    ) -> None:
        self._deployer = deployer
        self._workspace = workspace
        self._console = console

    def run(
        self,
        version: SemanticVersion,
        jobs: Sequence[DeployJob],
        selected_channel: str | None = None,
    ) -> Result[ReleaseSummary, ChannelFailure]:
        """Deploy each job in order, stopping at the first failure.

        Args:
            version: Release version (for reporting).
            jobs: One job per channel, in release order.
            selected_channel: If set, every other channel is skipped.

        Returns:
            Ok(ReleaseSummary) if every selected channel succeeded,
            Err(ChannelFailure) for the first channel that did not.
        """
        reports: list[DeployReport] = []
        skipped: list[str] = []

        for job in jobs:
            if selected_channel and job.channel != selected_channel:
                skipped.append(job.channel)
                continue

            match self._deployer.deploy(job, self._workspace):
                case Ok(report):
                    reports.append(report)
                case Err(failure):
                    return Err(failure)

        if selected_channel and not reports:
            self._console.warning(f"channel {selected_channel} is not part of release {version}")

        self._console.debug("Complete! Cleaning up file-system and exiting.")
        return Ok(ReleaseSummary(version=version, reports=tuple(reports), skipped=tuple(skipped)))

"""Build and publish one release channel.

Pipeline for a channel:

1. ``npm install puppeteer@<pinned>`` (stable channels use the system Chrome).
2. ``npm run post-install``, which regenerates version.json.
3. Read image labels from version.json.
4. One ``docker build`` producing every tag of the channel.
5. Publish: push all tags concurrently, commit the descriptor files, tag and
   push the patch tag, reset the workspace.

Steps 1-4 and the pushes are fatal on failure. The git bookkeeping in step 5
is tolerated: on repeated runs there is often nothing to commit and the tag
already exists upstream.

In single-tag mode (``TAG_NAME``) the image is built under that one tag and
step 5 is skipped entirely: no push, no git, no reset.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed

from dockrel.core.result import Err, Ok, Recovered, Result, tolerate
from dockrel.git.repository import Repository
from dockrel.output.console import ConsoleProtocol
from dockrel.platform.process import CommandRunner, ExecutionError
from dockrel.release.config import ReleaseConfig, ReleaseSettings
from dockrel.release.errors import ChannelFailure
from dockrel.release.metadata import read_build_metadata
from dockrel.release.model import BuildMetadata, DeployJob, DeployReport, TagSet, VersionInfo
from dockrel.release.tags import is_stable_channel
from dockrel.release.workspace import DESCRIPTOR_FILES, WorkspaceHandle

__all__ = ["ChannelDeployer", "build_command", "image_refs", "install_env"]

type PipelineResult = Result[DeployReport, ChannelFailure]


def install_env(info: VersionInfo, *, stable: bool) -> dict[str, str]:
    """Environment for ``npm install`` and ``npm run post-install``."""
    env = {"PUPPETEER_CHROMIUM_REVISION": info.engine_revision}
    if stable:
        env.update(
            {
                "USE_CHROME_STABLE": "true",
                "CHROMEDRIVER_SKIP_DOWNLOAD": "false",
                "PUPPETEER_SKIP_CHROMIUM_DOWNLOAD": "true",
            }
        )
    return env


def image_refs(tags: TagSet, settings: ReleaseSettings) -> tuple[str, ...]:
    """Image references to build: the single override tag, or all three."""
    if settings.tag_name:
        return (f"{settings.repo}:{settings.tag_name}",)
    return tuple(f"{settings.repo}:{tag}" for tag in tags)


def build_command(
    *,
    info: VersionInfo,
    stable: bool,
    metadata: BuildMetadata,
    settings: ReleaseSettings,
    images: tuple[str, ...],
) -> list[str]:
    """``docker build`` invocation tagging every image in one build."""
    build_args = (
        ("PUPPETEER_CHROMIUM_REVISION", info.engine_revision),
        ("USE_CHROME_STABLE", "true" if stable else "false"),
        ("PUPPETEER_VERSION", info.engine_version),
        ("BASE_IMAGE", settings.base_image),
        ("USER", settings.user),
    )

    cmd = ["docker", "build", "--quiet"]
    for key, value in build_args:
        cmd.extend(["--build-arg", f"{key}={value}"])
    for key, value in metadata.labels():
        cmd.extend(["--label", f"{key}={value}"])
    for image in images:
        cmd.extend(["-t", image])
    cmd.append(".")
    return cmd


class ChannelDeployer:
    """Runs the build/publish pipeline for one channel at a time.

    Attributes:
        config: Release matrix and operator settings.
    """

    def __init__(
        self,
        runner: CommandRunner,
        config: ReleaseConfig,
        console: ConsoleProtocol,
    ) -> None:
        self._runner = runner
        self._repo = Repository(runner)
        self._console = console
        self.config = config

    @property
    def single_tag(self) -> bool:
        return bool(self.config.settings.tag_name)

    def deploy(self, job: DeployJob, workspace: WorkspaceHandle) -> PipelineResult:
        """Build (and unless in single-tag mode, publish) one channel.

        Returns:
            Ok(DeployReport) on success.
            Err(ChannelFailure) on the first fatal error; the workspace is
            left untouched in that case.
        """
        channel = job.channel
        tags = job.tags

        info_r = self.config.version_info(channel)
        if isinstance(info_r, Err):
            return Err(ChannelFailure(channel, "config", info_r.error))
        info = info_r.value
        stable = is_stable_channel(tags)

        self._console.header(
            f"Beginning docker build and publish of tag {tags.patch} {tags.minor} {tags.major}"
        )

        env = install_env(info, stable=stable)
        install = self._runner.run(
            [
                "npm",
                "install",
                "--silent",
                "--save",
                "--save-exact",
                f"puppeteer@{info.engine_version}",
            ],
            env=env,
        )
        if isinstance(install, Err):
            return Err(ChannelFailure(channel, "install", install.error))

        post_install = self._runner.run(["npm", "run", "post-install"], env=env)
        if isinstance(post_install, Err):
            return Err(ChannelFailure(channel, "post-install", post_install.error))

        metadata = read_build_metadata(workspace.descriptor_path)
        if isinstance(metadata, Err):
            return Err(ChannelFailure(channel, "metadata", metadata.error))

        images = image_refs(tags, self.config.settings)
        cmd = build_command(
            info=info,
            stable=stable,
            metadata=metadata.value,
            settings=self.config.settings,
            images=images,
        )
        build = self._runner.run(cmd)
        if isinstance(build, Err):
            return Err(ChannelFailure(channel, "build", build.error))

        if self.single_tag:
            # Tag-only mode: the image stays local.
            self._console.info(f"built {images[0]} (single-tag mode, not pushed)")
            return Ok(DeployReport(channel=channel, images=images))

        pushed = self._push_all(images)
        if isinstance(pushed, Err):
            return Err(ChannelFailure(channel, "push", pushed.error))

        recovered = self._record_release(tags)

        reset = workspace.reset()
        if isinstance(reset, Err):
            return Err(ChannelFailure(channel, "reset", reset.error))

        self._console.success(f"{channel}: published {', '.join(images)}")
        return Ok(
            DeployReport(
                channel=channel,
                images=images,
                pushed=pushed.value,
                recovered=recovered,
                workspace_reset=True,
            )
        )

    def _push_all(self, images: tuple[str, ...]) -> Result[tuple[str, ...], ExecutionError]:
        """Push every tag of the built image concurrently, failing fast."""
        with ThreadPoolExecutor(max_workers=len(images)) as pool:
            futures = [pool.submit(self._runner.run, ["docker", "push", image]) for image in images]
            for future in as_completed(futures):
                result = future.result()
                if isinstance(result, Err):
                    for pending in futures:
                        pending.cancel()
                    return Err(result.error)
        return Ok(images)

    def _record_release(self, tags: TagSet) -> tuple[tuple[str, Recovered[ExecutionError]], ...]:
        """Commit descriptor files and (re)tag the patch version.

        Returns the steps that failed and were tolerated.
        """
        steps: tuple[tuple[str, Callable[[], Result[str, ExecutionError]]], ...] = (
            ("add", lambda: self._repo.add_force(list(DESCRIPTOR_FILES))),
            ("commit", lambda: self._repo.commit(f"Committing release files for tag {tags.patch}")),
            ("tag", lambda: self._repo.tag_force(tags.patch)),
            ("push-tag", lambda: self._repo.push_tag_force(tags.patch)),
        )

        recovered: list[tuple[str, Recovered[ExecutionError]]] = []
        for name, step in steps:
            outcome = tolerate(step())
            if isinstance(outcome, Recovered):
                self._console.warning(f"git {name} skipped: {outcome.error}")
                recovered.append((name, outcome))
        return tuple(recovered)

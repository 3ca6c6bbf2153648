"""Git operations used by the release pipeline.

Every method returns a Result; deciding which failures are tolerated is up to
the caller (see ``dockrel.release.deployer``).

Usage:
    repo = Repository(executor)
    match repo.tag_force("1.2.3-71"):
        case Ok(_):
            ...
        case Err(e):
            console.warning(str(e))
"""

from __future__ import annotations

from dockrel.core.result import Result
from dockrel.platform.process import CommandRunner, ExecutionError

__all__ = ["DEFAULT_REMOTE", "Repository"]

DEFAULT_REMOTE = "origin"


class Repository:
    """The release checkout, driven through a command runner.

    The runner's working directory is the repository root.
    """

    def __init__(self, runner: CommandRunner, *, remote: str = DEFAULT_REMOTE) -> None:
        self._runner = runner
        self.remote = remote

    def add_force(self, paths: list[str]) -> Result[str, ExecutionError]:
        """Stage files even if they are gitignored."""
        return self._git(["add", "--force", *paths])

    def commit(self, message: str) -> Result[str, ExecutionError]:
        """Commit staged changes. Fails when there is nothing to commit."""
        return self._git(["commit", "--quiet", "-m", message])

    def tag_force(self, name: str) -> Result[str, ExecutionError]:
        """Create or move a lightweight tag to HEAD."""
        return self._git(["tag", "--force", name])

    def push_tag_force(self, name: str) -> Result[str, ExecutionError]:
        """Force-push a single tag, skipping pre-push hooks."""
        return self._git(["push", self.remote, name, "--force", "--quiet", "--no-verify"])

    def reset_hard(self, ref: str) -> Result[str, ExecutionError]:
        """Discard all tracked working tree changes and move HEAD to ``ref``."""
        return self._git(["reset", ref, "--hard"])

    def _git(self, args: list[str]) -> Result[str, ExecutionError]:
        return self._runner.run(["git", *args])

"""The build checkout shared by every channel of a release.

Each channel installs a different puppeteer into ``node_modules`` and rewrites
``version.json`` and friends. ``Workspace.reset`` puts the checkout back to the
upstream baseline so the next channel starts from a pristine tree.

Rationale:
- The deployer receives the workspace as an explicit handle, so tests swap in
  a fake (or a temp directory) instead of mutating a real checkout.
- Reset is only called at the end of a full publish. On a fatal error the
  tree is left as-is for inspection.
"""

from __future__ import annotations

import os
import shutil
import stat
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from dockrel.core.result import Err, Ok, Result
from dockrel.git.repository import Repository
from dockrel.platform.process import ExecutionError

__all__ = [
    "DEFAULT_BASELINE",
    "DEPENDENCY_DIR",
    "DESCRIPTOR_FILES",
    "Workspace",
    "WorkspaceHandle",
]

DEFAULT_BASELINE = "origin/master"
DEPENDENCY_DIR = "node_modules"

# Written by post-install; committed alongside each patch tag.
DESCRIPTOR_FILES = ("version.json", "hosts.json", "hints.json", "protocol.json")


class WorkspaceHandle(Protocol):
    @property
    def root(self) -> Path: ...

    @property
    def descriptor_path(self) -> Path:
        """Path to version.json."""
        ...

    def reset(self) -> Result[None, ExecutionError]: ...


class Workspace:
    """A git checkout of the image sources.

    Attributes:
        root: Repository root (contains package.json and the Dockerfile).
        baseline: Ref the working tree is hard-reset to between channels.
    """

    def __init__(
        self,
        root: Path,
        repository: Repository,
        *,
        baseline: str = DEFAULT_BASELINE,
    ) -> None:
        self._root = root
        self._repository = repository
        self.baseline = baseline

    @property
    def root(self) -> Path:
        return self._root

    @property
    def manifest_path(self) -> Path:
        """Path to package.json."""
        return self._root / "package.json"

    @property
    def descriptor_path(self) -> Path:
        return self._root / "version.json"

    @property
    def dependency_dir(self) -> Path:
        return self._root / DEPENDENCY_DIR

    def reset(self) -> Result[None, ExecutionError]:
        """Hard-reset to the baseline, then delete the dependency tree.

        Safe to call repeatedly.
        """
        reset = self._repository.reset_hard(self.baseline)
        if isinstance(reset, Err):
            return reset

        try:
            if self.dependency_dir.exists():
                shutil.rmtree(self.dependency_dir, onexc=_remove_readonly)
        except OSError as e:
            return Err(
                ExecutionError(
                    command=("rm", "-rf", DEPENDENCY_DIR),
                    returncode=-1,
                    stderr=str(e),
                )
            )
        return Ok(None)


def _remove_readonly(func: Callable[[str], object], path: str, exc: BaseException) -> None:
    """Retry once after clearing the read-only bit (npm caches on Windows)."""
    if isinstance(exc, PermissionError):
        os.chmod(path, stat.S_IWRITE)
        func(path)
    else:
        raise exc

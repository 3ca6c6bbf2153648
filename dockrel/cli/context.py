from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from dockrel.core.errors import ErrorCode
from dockrel.core.result import Err
from dockrel.git.repository import Repository
from dockrel.output.console import ConsoleProtocol, RichConsole
from dockrel.platform.process import CommandExecutor
from dockrel.release.config import ReleaseConfig, ReleaseSettings, load_release_config
from dockrel.release.workspace import DEFAULT_BASELINE, Workspace


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    config: ReleaseConfig
    console: ConsoleProtocol
    executor: CommandExecutor


def exit_with(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def resolve_root(workspace: Path | None) -> Path:
    """--workspace, then $WORKSPACE_ROOT, then the current directory."""
    if workspace is None:
        env = os.environ.get("WORKSPACE_ROOT")
        workspace = Path(env) if env else Path.cwd()
    try:
        root = workspace.expanduser().resolve()
    except OSError as e:
        exit_with(f"invalid --workspace: {e}", code=ErrorCode.CONFIG_ERROR)
    if not root.is_dir():
        exit_with(f"workspace '{root}' is not a directory", code=ErrorCode.CONFIG_ERROR)
    return root


def build_context(
    *,
    workspace: Path | None,
    settings: ReleaseSettings,
    baseline: str = DEFAULT_BASELINE,
    verbose: bool = False,
) -> CLIContext:
    root = resolve_root(workspace)
    console = RichConsole(verbose=verbose)
    executor = CommandExecutor(cwd=root, console=console)
    ws = Workspace(root, Repository(executor), baseline=baseline)

    loaded = load_release_config(ws.manifest_path, settings)
    if isinstance(loaded, Err):
        exit_with(str(loaded.error), code=ErrorCode.CONFIG_ERROR)

    return CLIContext(workspace=ws, config=loaded.value, console=console, executor=executor)

"""External command execution with Result-based error handling.

All npm, docker and git invocations go through ``CommandExecutor.run``. Only
a non-zero exit status is a failure; anything a tool writes to stderr on
success (npm deprecation notices, docker progress) is surfaced as a warning.

Usage:
    executor = CommandExecutor(cwd=workspace.root, console=console)
    match executor.run(["docker", "push", "browserless/chrome:1.2.3-71"]):
        case Ok(stdout):
            console.debug(stdout)
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from dockrel.core.result import Err, Ok, Result
from dockrel.output.console import ConsoleProtocol

__all__ = ["CommandRunner", "CommandExecutor", "ExecutionError", "STDERR_TAIL_CHARS"]

# Only the end of a noisy stderr stream is worth showing.
STDERR_TAIL_CHARS = 500


@dataclass(frozen=True, slots=True)
class ExecutionError:
    """An external command exited non-zero (or could not be started).

    Attributes:
        command: The argument vector that was executed.
        returncode: Exit status, -1 if the process could not be spawned.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        detail = self.stderr.strip()[-STDERR_TAIL_CHARS:]
        if detail:
            return f"{cmd_str} failed (exit {self.returncode}): {detail}"
        return f"{cmd_str} failed (exit {self.returncode})"


class CommandRunner(Protocol):
    """Anything that can run an external command for the release pipeline."""

    def run(
        self,
        cmd: list[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> Result[str, ExecutionError]: ...


class CommandExecutor:
    """Runs commands in a fixed working directory.

    Holds no state between calls besides its configuration.

    Attributes:
        cwd: Working directory for every command.
    """

    def __init__(self, cwd: Path, console: ConsoleProtocol) -> None:
        self.cwd = cwd
        self._console = console

    def run(
        self,
        cmd: list[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> Result[str, ExecutionError]:
        """Execute a command and return its trimmed stdout.

        Args:
            cmd: Command and arguments.
            env: Variables layered on top of the current environment.

        Returns:
            Ok(stdout.strip()) on exit status 0, Err(ExecutionError) otherwise.
        """
        self._console.debug(f'  "{_display(cmd, env)}"')

        full_env: dict[str, str] | None = None
        if env:
            full_env = {**os.environ, **env}

        try:
            proc = subprocess.run(
                cmd,
                cwd=str(self.cwd),
                env=full_env,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            return Err(ExecutionError(command=tuple(cmd), returncode=-1, stderr=str(e)))

        if proc.stderr.strip():
            self._console.warning(proc.stderr[-STDERR_TAIL_CHARS:])

        if proc.returncode != 0:
            return Err(
                ExecutionError(
                    command=tuple(cmd),
                    returncode=proc.returncode,
                    stdout=proc.stdout,
                    stderr=proc.stderr,
                )
            )

        return Ok(proc.stdout.strip())


def _display(cmd: list[str], env: Mapping[str, str] | None) -> str:
    prefix = [f"{k}={v}" for k, v in (env or {}).items()]
    return shlex.join([*prefix, *cmd]) if prefix else shlex.join(cmd)

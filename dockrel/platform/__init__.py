"""External process execution."""

from .process import CommandExecutor, CommandRunner, ExecutionError

__all__ = ["CommandExecutor", "CommandRunner", "ExecutionError"]

"""Result types for explicit error handling.

Every operation that talks to the outside world returns one of these instead
of raising. Three variants exist:

- ``Ok(value)``: the operation succeeded.
- ``Err(error)``: the operation failed and the caller must stop.
- ``Recovered(error)``: the operation failed, but the failure is tolerated
  (e.g. ``git commit`` with nothing to commit). The pipeline continues and the
  error is kept for reporting.

Usage:
    match executor.run(["docker", "push", ref]):
        case Ok(stdout):
            ...
        case Err(error):
            return Err(error)
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "Err",
    "Ok",
    "Recovered",
    "Result",
    "tolerate",
]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Fatal failure.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


@dataclass(frozen=True, slots=True)
class Recovered[E]:
    """Tolerated failure.

    Produced only by steps whose failure is expected on repeated runs and must
    not abort the pipeline.

    Attributes:
        error: The error that was tolerated.
    """

    error: E

    def __repr__(self) -> str:
        return f"Recovered({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]


def tolerate[T, E](result: Result[T, E]) -> Ok[T] | Recovered[E]:
    """Downgrade an Err to Recovered, leaving Ok untouched.

    Example:
        commit = tolerate(repo.commit("deploy"))
        if isinstance(commit, Recovered):
            console.warning(f"commit skipped: {commit.error}")
    """
    if isinstance(result, Err):
        return Recovered(result.error)
    return result

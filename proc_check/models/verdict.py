"""Models for the pass/fail judgment of a test."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from proc_check.models.result import AbnormalExit, NormalExit, SpawnError


@dataclass(frozen=True, kw_only=True)
class StdoutMismatch:
    """Captured stdout differs from the expected text."""

    kind: Literal["stdout"] = field(default="stdout", init=False)
    expected: str
    actual: bytes


@dataclass(frozen=True, kw_only=True)
class ExitCodeMismatch:
    """The process did not exit with the expected code."""

    kind: Literal["exit-code"] = field(default="exit-code", init=False)
    expected: int
    actual: NormalExit | AbnormalExit


@dataclass(frozen=True, kw_only=True)
class SpawnFailure:
    """The command could not be started."""

    kind: Literal["spawn"] = field(default="spawn", init=False)
    cause: SpawnError


@dataclass(frozen=True, kw_only=True)
class TimeoutExpired:
    """The command was killed for running too long."""

    kind: Literal["timeout"] = field(default="timeout", init=False)
    timeout: float


Mismatch = StdoutMismatch | ExitCodeMismatch | SpawnFailure | TimeoutExpired


@dataclass(frozen=True, kw_only=True)
class Passed:
    """Every expectation was met."""

    passed: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True, kw_only=True)
class Failed:
    """At least one expectation was not met; reasons are kept in check order."""

    passed: Literal[False] = field(default=False, init=False)
    mismatches: Sequence[Mismatch]

    def __post_init__(self) -> None:
        if not self.mismatches:
            raise ValueError("A failed verdict needs at least one mismatch")
        object.__setattr__(self, "mismatches", tuple(self.mismatches))


Verdict = Passed | Failed

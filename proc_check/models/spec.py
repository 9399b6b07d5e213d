"""Model for the test specification loaded from a YAML document."""

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from proc_check.models.base import Model


class TestSpec(Model):
    """Validated description of one test: a command and its expectations.

    ``command`` accepts either a list of strings (argv as given) or a single
    string naming the executable, and is always stored as a tuple.
    """

    __test__ = False

    command: tuple[str, ...] = Field(
        ..., description="Executable followed by its arguments"
    )
    expected_stdout: str | None = Field(
        default=None,
        validation_alias=AliasChoices("stdout", "expected_stdout"),
        description="Exact expected standard output (None means unchecked)",
    )
    expected_exit_code: int | None = Field(
        default=None,
        validation_alias=AliasChoices("exit-code", "expected_exit_code"),
        description="Expected exit code (None means unchecked)",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds before the command is killed (None means no limit)",
    )

    @field_validator("command", mode="before")
    @classmethod
    def _resolve_command(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if " " in value.strip():
            raise ValueError("Please define a list instead of a string.")
        return (value,) if value else ()

    @field_validator("command")
    @classmethod
    def _check_command(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value or not value[0]:
            raise ValueError("Command needs at least one element")
        if any("\0" in arg for arg in value):
            raise ValueError("Command arguments must not contain NUL characters")
        return value

    @property
    def executable(self) -> str:
        """Name or path of the program to run."""
        return self.command[0]

    @property
    def arguments(self) -> tuple[str, ...]:
        """Arguments passed to the program."""
        return self.command[1:]

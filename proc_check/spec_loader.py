"""Load a test specification from a YAML document."""

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from proc_check.models.spec import TestSpec

log = logging.getLogger(__name__)

EXIT_CODE_KEYS = ("exit-code", "expected_exit_code")
DEFAULT_EXIT_CODE = 0


class SpecLoadError(ValueError):
    """Raised when a test document cannot be turned into a TestSpec."""


async def load_test_spec(path: Path) -> TestSpec:
    """Load and validate the test document at ``path``.

    A document that omits ``exit-code`` expects the command to exit with 0;
    ``exit-code: null`` disables the exit code check.

    Raises:
        SpecLoadError: If the file is missing or unreadable, is not valid YAML,
            or does not describe a valid test

    """
    if not path.is_file():
        raise SpecLoadError(f"Test file not found: {path}")

    log.debug("Reading test file %s", path)
    try:
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SpecLoadError(f"Test file is not valid UTF-8: {path}") from e
    except OSError as e:
        raise SpecLoadError(f"Cannot read test file {path}: {e.strerror}") from e
    return parse_test_spec(content, source=str(path))


def parse_test_spec(content: str, source: str = "<string>") -> TestSpec:
    """Parse the text of a test document into a TestSpec."""
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"Invalid YAML in {source}: {e}") from e

    if document is None:
        raise SpecLoadError(f"Empty test file: {source}")

    if not isinstance(document, Mapping):
        raise SpecLoadError(
            f"Invalid test spec in {source}: expected a mapping, "
            f"got {type(document).__name__}"
        )

    try:
        return TestSpec.model_validate(apply_defaults(document))
    except ValidationError as e:
        raise SpecLoadError(f"Invalid test spec in {source}: {e}") from e


def apply_defaults(document: Mapping[str, Any]) -> dict[str, Any]:
    """Fill in document-level defaults that the model itself leaves unset."""
    resolved = dict(document)
    if not any(key in resolved for key in EXIT_CODE_KEYS):
        resolved["exit-code"] = DEFAULT_EXIT_CODE
    return resolved

"""Fixtures for integration tests that spawn real processes."""

import stat
from pathlib import Path
from typing import Protocol

import pytest


class WriteScriptFn(Protocol):
    """Protocol for script creation function."""

    def __call__(self, name: str, body: str, *, executable: bool = True) -> Path:
        """Write a shell script and return its path."""


class WriteTestFileFn(Protocol):
    """Protocol for test document creation function."""

    def __call__(self, content: str) -> Path:
        """Write a YAML test document and return its path."""


@pytest.fixture
def write_script(tmp_path: Path) -> WriteScriptFn:
    """Factory writing ``#!/bin/sh`` scripts into a temporary directory."""

    def _write(name: str, body: str, *, executable: bool = True) -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        mode = stat.S_IRUSR | stat.S_IWUSR
        if executable:
            mode |= stat.S_IXUSR
        path.chmod(mode)
        return path

    return _write


@pytest.fixture
def write_test_file(tmp_path: Path) -> WriteTestFileFn:
    """Factory writing test documents into a temporary directory."""

    def _write(content: str) -> Path:
        path = tmp_path / "test.yaml"
        path.write_text(content)
        return path

    return _write

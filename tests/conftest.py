"""Shared fixtures for the elfview test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from shared.logger import ElfviewLogger

from elfview.parsers.elf_parser import ElfParser

from elfimage import sample_object


@pytest.fixture
def logger() -> ElfviewLogger:
    return ElfviewLogger("test", log_level="DEBUG", console_output=False)


@pytest.fixture
def parser(logger: ElfviewLogger) -> ElfParser:
    return ElfParser(logger=logger)


@pytest.fixture
def rel_image() -> bytes:
    return sample_object()


@pytest.fixture
def rel_file(tmp_path: Path, rel_image: bytes) -> Path:
    path = tmp_path / "sample.o"
    path.write_bytes(rel_image)
    return path

"""Fixtures and configuration for pytest."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Fixture writing a file below tmp_path and returning its path."""

    def write(relative_path: str, content: str) -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return write


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Fixture capturing loguru messages of WARNING level and above."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, format="{message}", level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def name_by_file() -> Callable[[str, str, str], str]:
    """Fixture providing a scoped name generator of the form <file stem>__<local>."""

    def generate(local_name: str, path: str, css: str = "") -> str:
        return f"{Path(path).stem}__{local_name}"

    return generate

"""Fixtures for Phase 5 CLI tests."""

import pytest
from click.testing import CliRunner
from loguru import logger


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def detach_log_sink():
    """Drop the stderr sink the CLI installs once the runner's streams close."""
    yield
    logger.remove()


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("ab ab\ncd", encoding="utf-8")
    return path

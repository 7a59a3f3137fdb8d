"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Drop logging configuration left behind by CLI and logging tests.

    setup_logging binds the stream that is current at call time; CliRunner
    swaps and closes stderr around each invocation.
    """
    yield
    structlog.reset_defaults()

"""Pytest configuration for test isolation.

The package logger is configured at most once per process. CLI tests go
through the root callback, which configures it against whatever stream is
current at the time; resetting it after every test keeps later tests from
writing to a closed capture buffer. ``BUDGET_INSIGHTS_LOG_LEVEL`` is cleared
so a developer's environment cannot change log output under test.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime

import pytest

from budget_insights import logging_setup


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("BUDGET_INSIGHTS_LOG_LEVEL", raising=False)
    yield
    logger = logging.getLogger("budget_insights")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._handler = None


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time used by the analytics tests."""

    return datetime(2025, 8, 20, 12, 0)

"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and a
controllable clock for timer scenarios.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from worklog_cli.adapters import InMemoryRepository
from worklog_cli.services.task_store import TaskStore

from helpers import FakeClock


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture()
def store(repo, clock) -> TaskStore:
    """Empty store with default vocabularies, an in-memory repo and a fake clock."""
    return TaskStore(repo, clock=clock)


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from worklog_cli.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("worklog_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("worklog_cli.services.config_service.user_data_dir", return_value=tmpdir):
            yield get_config_service()
    get_config_service.cache_clear()


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path):
    """Keep the application log file inside *tmp_path*."""
    import worklog_cli.utils.logger as logger_mod

    original = logger_mod._logger
    logger_mod._logger = None
    logging.getLogger("worklog_cli").handlers.clear()
    logging.getLogger("worklog_cli").propagate = True

    with patch("worklog_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield

    for handler in logging.getLogger("worklog_cli").handlers:
        handler.close()
    logging.getLogger("worklog_cli").handlers.clear()
    logging.getLogger("worklog_cli").propagate = True
    logger_mod._logger = original


@pytest.fixture(autouse=True)
def restore_console_color():
    """Undo an ``output.color`` setting applied by a command."""
    yield
    from worklog_cli.utils.ui.console import set_color

    set_color(True)

"""Pytest fixtures and configuration for tasksort tests."""

import pytest
from datetime import datetime
from fastapi.testclient import TestClient

from tasksort.models.settings import SortCriterion, SortField, SortOrder, SortSettings
from tasksort.models.status_cycle import StatusCycle


@pytest.fixture
def now():
    """Fixed reference time so overdue checks are deterministic."""
    return datetime(2026, 1, 26, 12, 0, 0)


@pytest.fixture
def settings():
    """Default settings snapshot (default cycle, default mark groups)."""
    return SortSettings()


@pytest.fixture
def three_state_cycle():
    """Not Started -> In Progress -> Completed."""
    return StatusCycle(
        id="simple",
        name="Simple",
        priority=0,
        cycle=["Not Started", "In Progress", "Completed"],
        marks={"Not Started": " ", "In Progress": "/", "Completed": "x"},
    )


@pytest.fixture
def review_cycle():
    """Lower priority cycle that shares "x" with the simple cycle."""
    return StatusCycle(
        id="review",
        name="Review",
        priority=1,
        cycle=["Draft", "In Review", "Approved"],
        marks={"Draft": "d", "In Review": "r", "Approved": "x"},
    )


@pytest.fixture
def make_criteria():
    """Build criteria from (field, order) pairs, e.g. ("content", "asc")."""
    def _make(*pairs):
        return [SortCriterion(field=SortField(field), order=SortOrder(order)) for field, order in pairs]
    return _make


@pytest.fixture
def sample_task_base():
    """Base task record that tests override field by field."""
    return {
        "id": "task-1",
        "status": " ",
        "completed": False,
        "content": "Test Task",
        "file_path": "notes.md",
        "metadata": {"tags": []},
    }


@pytest.fixture
def test_client():
    """FastAPI test client; restores the in-memory settings afterwards."""
    from tasksort.api import app as app_module

    original_settings = app_module.current_settings
    with TestClient(app_module.app) as client:
        yield client
    app_module.current_settings = original_settings

"""Sort settings models for tasksort.

Settings are passed explicitly into every engine function; nothing in the engine
reads ambient state. Field names are snake_case, but camelCase aliases are
accepted so an exported plugin settings file validates as-is.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tasksort.models.constants import (
    DEFAULT_ABANDONED_MARKS,
    DEFAULT_COMPLETED_MARKS,
    DEFAULT_CYCLE_ID,
    DEFAULT_CYCLE_NAME,
    DEFAULT_IN_PROGRESS_MARKS,
    DEFAULT_NOT_STARTED_MARKS,
    DEFAULT_PLANNED_MARKS,
    DEFAULT_STATUS_CYCLE,
    DEFAULT_STATUS_MARKS,
    MARK_SEPARATOR,
)
from tasksort.models.status_cycle import StatusCycle


class SortField(str, Enum):
    """Fields a sort criterion can address."""
    STATUS = "status"
    COMPLETED = "completed"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"
    START_DATE = "startDate"
    SCHEDULED_DATE = "scheduledDate"
    CREATED_DATE = "createdDate"
    COMPLETED_DATE = "completedDate"
    CONTENT = "content"
    TAGS = "tags"
    PROJECT = "project"
    CONTEXT = "context"
    RECURRENCE = "recurrence"
    FILE_PATH = "filePath"
    LINE_NUMBER = "lineNumber"


class SortOrder(str, Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"


class MetadataFormat(str, Enum):
    """Inline metadata syntax understood by the line parser."""
    TASKS = "tasks"
    DATAVIEW = "dataview"


class SortCriterion(BaseModel):
    """One key of a multi-key sort; criteria are evaluated left to right."""

    field: SortField
    order: SortOrder = SortOrder.ASC


class TaskStatusMarks(BaseModel):
    """Pipe-delimited mark groups, e.g. ``completed="x|X"``.

    ``completed`` is the completed bucket and ``abandoned`` the cancelled bucket
    used by the status rank table.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    completed: str = DEFAULT_COMPLETED_MARKS
    in_progress: str = DEFAULT_IN_PROGRESS_MARKS
    abandoned: str = DEFAULT_ABANDONED_MARKS
    planned: str = DEFAULT_PLANNED_MARKS
    not_started: str = DEFAULT_NOT_STARTED_MARKS

    def groups(self) -> Dict[str, List[str]]:
        """Return every group's marks, in declaration order."""
        return {name: split_marks(value) for name, value in self.model_dump().items()}

    def completed_marks(self) -> List[str]:
        return split_marks(self.completed or DEFAULT_COMPLETED_MARKS)

    def cancelled_marks(self) -> List[str]:
        return split_marks(self.abandoned or DEFAULT_ABANDONED_MARKS)


def split_marks(value: str) -> List[str]:
    """Split a pipe-delimited mark string, dropping empty entries."""
    return [mark for mark in (value or "").split(MARK_SEPARATOR) if mark]


def default_sort_criteria() -> List[SortCriterion]:
    return [
        SortCriterion(field=SortField.COMPLETED, order=SortOrder.ASC),
        SortCriterion(field=SortField.STATUS, order=SortOrder.ASC),
        SortCriterion(field=SortField.PRIORITY, order=SortOrder.ASC),
        SortCriterion(field=SortField.DUE_DATE, order=SortOrder.ASC),
    ]


def default_status_cycles() -> List[StatusCycle]:
    return [
        StatusCycle(
            id=DEFAULT_CYCLE_ID,
            name=DEFAULT_CYCLE_NAME,
            description="Standard task lifecycle with all states",
            priority=0,
            cycle=list(DEFAULT_STATUS_CYCLE),
            marks=dict(DEFAULT_STATUS_MARKS),
            enabled=True,
        )
    ]


class SortSettings(BaseModel):
    """Snapshot of everything the sort engine needs from user settings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sort_tasks: bool = Field(True, description="Enable/disable task sorting")
    sort_criteria: List[SortCriterion] = Field(default_factory=default_sort_criteria)

    status_cycles: List[StatusCycle] = Field(default_factory=default_status_cycles)

    # Flat single-cycle settings, used when no multi-cycle entry is enabled
    task_status_cycle: List[str] = Field(default_factory=lambda: list(DEFAULT_STATUS_CYCLE))
    task_status_marks: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_STATUS_MARKS))
    exclude_marks_from_cycle: List[str] = Field(default_factory=list)

    task_statuses: TaskStatusMarks = Field(default_factory=TaskStatusMarks)
    prefer_metadata_format: MetadataFormat = MetadataFormat.TASKS

"""Data models for tasksort."""

from tasksort.models.task import Block, ParsedTask, TaskMetadata, TaskNode
from tasksort.models.settings import (
    MetadataFormat,
    SortCriterion,
    SortField,
    SortOrder,
    SortSettings,
    TaskStatusMarks,
)
from tasksort.models.status_cycle import (
    CycleSource,
    LegacyCycle,
    LegacyStatusConfig,
    MultiCycle,
    NextStatusResult,
    StatusCycle,
)

__all__ = [
    "Block",
    "ParsedTask",
    "TaskMetadata",
    "TaskNode",
    "MetadataFormat",
    "SortCriterion",
    "SortField",
    "SortOrder",
    "SortSettings",
    "TaskStatusMarks",
    "CycleSource",
    "LegacyCycle",
    "LegacyStatusConfig",
    "MultiCycle",
    "NextStatusResult",
    "StatusCycle",
]

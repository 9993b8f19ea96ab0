"""Status cycle models for tasksort.

A status cycle is an ordered, named, prioritized list of statuses (each with a
checkbox mark) that a task advances through. Several cycles can be enabled at
once; when more than one contains the same mark, the lower priority number wins.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StatusCycle(BaseModel):
    """A single prioritized status cycle."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique identifier for this cycle")
    name: str = Field(..., description="Display name for this cycle")
    description: Optional[str] = Field(None, description="Optional description")
    priority: int = Field(0, description="Priority level (lower number = higher priority, 0 is highest)")
    cycle: List[str] = Field(default_factory=list, description="Ordered list of status names")
    marks: Dict[str, str] = Field(default_factory=dict, description="Status name -> checkbox mark")
    enabled: bool = Field(True, description="Whether this cycle is currently enabled")
    color: Optional[str] = None
    icon: Optional[str] = None


class NextStatusResult(BaseModel):
    """Result of stepping forward or backward through a cycle."""

    status_name: str
    mark: Optional[str]
    cycle: StatusCycle


class LegacyStatusConfig(BaseModel):
    """Single-cycle view of the status configuration.

    Mirrors the flat settings that predate multiple cycles, so callers that only
    understand one cycle keep working.
    """

    cycle: List[str] = Field(default_factory=list)
    marks: Dict[str, str] = Field(default_factory=dict)
    exclude_marks_from_cycle: List[str] = Field(default_factory=list)
    is_multi_cycle: bool = False
    current_cycle_id: Optional[str] = None


class LegacyCycle(BaseModel):
    """Flat single-cycle configuration (no enabled multi-cycle entries)."""

    cycle: List[str] = Field(default_factory=list)
    marks: Dict[str, str] = Field(default_factory=dict)
    exclude_marks_from_cycle: List[str] = Field(default_factory=list)


class MultiCycle(BaseModel):
    """Enabled cycles in (priority, input position) order."""

    cycles: List[StatusCycle]


CycleSource = Union[LegacyCycle, MultiCycle]

"""Task data models for tasksort."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskMetadata(BaseModel):
    """Inline metadata attached to a task line.

    Dates are epoch milliseconds (local midnight for date-only values).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    priority: Optional[int] = Field(None, description="1 = lowest, 5 = highest")
    due_date: Optional[int] = None
    start_date: Optional[int] = None
    scheduled_date: Optional[int] = None
    created_date: Optional[int] = None
    completed_date: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    project: Optional[str] = None
    context: Optional[str] = None
    recurrence: Optional[str] = None


class ParsedTask(BaseModel):
    """A task recognized on a single line by the line parser."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Identifier derived from file path and 1-based line number")
    status: str = Field(..., description="Checkbox mark, e.g. ' ', 'x', '/'")
    completed: bool = False
    content: str = ""
    original_markdown: str = Field(..., description="The line exactly as it appears in the source")
    file_path: str = ""
    line: int = Field(0, description="1-based line number")
    metadata: TaskMetadata = Field(default_factory=TaskMetadata)


@dataclass(eq=False)
class TaskNode:
    """A task line placed in the parent/child forest of a text range.

    ``children`` owns the subtree. The parent link is a weak reference used only
    to walk upward; it never keeps a node alive.
    """

    id: str
    line_number: int  # 0-based, absolute within the document
    indentation: int
    original_markdown: str
    status: str
    completed: bool
    content: str
    metadata: TaskMetadata = field(default_factory=TaskMetadata)
    calculated_status: str = ""
    file_path: str = ""
    children: List["TaskNode"] = field(default_factory=list)
    _parent: Optional["weakref.ReferenceType[TaskNode]"] = field(
        default=None, init=False, repr=False
    )

    @property
    def parent(self) -> Optional["TaskNode"]:
        return self._parent() if self._parent is not None else None

    def add_child(self, child: "TaskNode") -> None:
        child._parent = weakref.ref(self)
        self.children.append(child)

    def iter_subtree(self):
        """Yield this node and its descendants depth-first, in current order."""
        yield self
        for child in self.children:
            yield from child.iter_subtree()


# Top-level nodes sharing one contiguous source range
Block = List[TaskNode]

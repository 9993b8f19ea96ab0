"""Task hierarchy construction for tasksort.

Turns the lines of a text range into a forest of TaskNodes. Parent/child is
inferred from indentation: a task is a child of the nearest preceding task with
strictly smaller indentation. Lines the parser does not recognize are skipped
without closing any open parent, so a blank line or a note between a parent
and its subtasks keeps them together.
"""

import logging
from datetime import date, datetime, time
from typing import Callable, List, Optional

from tasksort.models.constants import OVERDUE_STATUS
from tasksort.models.settings import MetadataFormat, SortSettings
from tasksort.models.task import ParsedTask, TaskNode
from tasksort.parsers.task_line import parse_task_line

logger = logging.getLogger(__name__)

# (file_path, line_text, one_based_line_number, metadata_format, config) -> task or None
LineParser = Callable[[str, str, int, MetadataFormat, Optional[SortSettings]], Optional[ParsedTask]]


def get_indentation(line: str) -> int:
    """Number of leading whitespace characters (tabs count as one)."""
    return len(line) - len(line.lstrip())


def _midnight_ms(today: date) -> float:
    return datetime.combine(today, time()).timestamp() * 1000


def calculate_status(parsed: ParsedTask, today_ms: float, cancelled_marks: List[str]) -> str:
    """Status used for ranking: "overdue" for open tasks due before today."""
    due = parsed.metadata.due_date
    if (
        not parsed.completed
        and parsed.status not in cancelled_marks
        and due is not None
        and due < today_ms
    ):
        return OVERDUE_STATUS
    return parsed.status


def build_task_hierarchy(
    block_text: str,
    line_offset: int,
    file_path: str,
    metadata_format: MetadataFormat,
    line_parser: Optional[LineParser] = None,
    config: Optional[SortSettings] = None,
    today: Optional[date] = None,
) -> List[TaskNode]:
    """Parse a text range into top-level TaskNodes with nested children.

    Args:
        block_text: Text of the range, lines separated by "\\n"
        line_offset: 0-based document line of the first line in block_text
        file_path: Source identifier passed through to the parser
        metadata_format: Inline metadata syntax
        line_parser: Line parser (defaults to parse_task_line)
        config: Settings snapshot handed to the parser and used for mark groups
        today: Reference day for overdue detection (defaults to today)

    Returns:
        Top-level nodes in source order
    """
    parser = line_parser or parse_task_line
    settings = config or SortSettings()
    cancelled_marks = settings.task_statuses.cancelled_marks()
    today_ms = _midnight_ms(today or date.today())

    roots: List[TaskNode] = []
    stack: List[TaskNode] = []

    for index, line in enumerate(block_text.split("\n")):
        line_number = line_offset + index
        # The parser numbers lines from 1
        parsed = parser(file_path, line, line_number + 1, metadata_format, config)
        if parsed is None:
            continue

        indentation = get_indentation(line)
        node = TaskNode(
            id=parsed.id,
            line_number=line_number,
            indentation=indentation,
            original_markdown=parsed.original_markdown,
            status=parsed.status,
            completed=parsed.completed,
            content=parsed.content,
            metadata=parsed.metadata,
            calculated_status=calculate_status(parsed, today_ms, cancelled_marks),
            file_path=parsed.file_path or file_path,
        )

        # A child must be indented strictly deeper than its parent
        while stack and stack[-1].indentation >= indentation:
            stack.pop()

        if stack:
            stack[-1].add_child(node)
        else:
            roots.append(node)
        stack.append(node)

    logger.debug(f"Built task hierarchy: {len(roots)} top-level tasks from line {line_offset}")
    return roots

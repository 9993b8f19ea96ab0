"""Text reconstruction for tasksort.

Writes sorted task blocks back over the original lines. Each block's tasks are
serialized depth-first (parent, then its sorted children). A block spans from
its first task line to the deepest line of its last subtree; non-task lines
inside that span (notes, blank lines between a parent and its subtasks) travel
with the task line directly above them. Lines outside every block span keep
their position and content.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from tasksort.models.task import Block, TaskNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteResult:
    text: str
    changed: bool


def _serialize(task: TaskNode, out: List[TaskNode]) -> None:
    out.append(task)
    for child in task.children:
        _serialize(child, out)


def rewrite_sorted_blocks(
    original_text: str,
    start_line: int,
    blocks: Sequence[Block],
) -> RewriteResult:
    """Rebuild the text of a range from its sorted task blocks.

    Args:
        original_text: Text of the range as it was parsed, lines separated by "\\n"
        start_line: 0-based document line of the first line of original_text
        blocks: Sorted blocks of top-level tasks (children already sorted)

    Returns:
        RewriteResult with the new text and whether it differs from the input
    """
    original_lines = original_text.split("\n")
    new_lines = list(original_lines)
    line_count = len(original_lines)

    for block in blocks:
        ordered: List[TaskNode] = []
        for task in block:
            _serialize(task, ordered)

        slots = [task.line_number - start_line for task in ordered]
        if not slots:
            continue
        first, last = min(slots), max(slots)
        if first < 0 or last >= line_count:
            logger.warning(
                f"Skipping task block at lines {first + start_line + 1}-{last + start_line + 1}: "
                f"outside the range being rewritten"
            )
            continue

        # Every line of the span belongs to the nearest task line above it
        owned = set(slots)
        attached: Dict[int, List[str]] = {}
        owner = first
        for index in range(first, last + 1):
            if index in owned:
                owner = index
                attached[owner] = []
            else:
                attached[owner].append(original_lines[index])

        rebuilt: List[str] = []
        for task, slot in zip(ordered, slots):
            rebuilt.append(task.original_markdown)
            rebuilt.extend(attached[slot])
        new_lines[first:last + 1] = rebuilt

    new_text = "\n".join(new_lines)
    return RewriteResult(text=new_text, changed=new_text != original_text)

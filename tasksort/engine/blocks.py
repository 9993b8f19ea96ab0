"""Contiguous task block detection for tasksort.

Top-level tasks separated by prose (or blank lines) must not be merged into one
sort, otherwise sorting would drag tasks across paragraphs. A block is a run of
top-level tasks where each one starts no later than the line right after the
deepest line of the previous task's subtree.
"""

from typing import List, Sequence

from tasksort.models.task import Block, TaskNode


def deepest_line(task: TaskNode) -> int:
    """Largest line number over a task and all of its descendants."""
    max_line = task.line_number
    for child in task.children:
        max_line = max(max_line, deepest_line(child))
    return max_line


def find_continuous_task_blocks(tasks: Sequence[TaskNode]) -> List[Block]:
    """Group top-level tasks into contiguous blocks.

    Args:
        tasks: Top-level tasks (any order)

    Returns:
        Blocks in line order; each block lists its tasks in line order
    """
    if not tasks:
        return []

    ordered = sorted(tasks, key=lambda t: t.line_number)

    blocks: List[Block] = []
    current: Block = [ordered[0]]

    for previous, task in zip(ordered, ordered[1:]):
        if task.line_number <= deepest_line(previous) + 1:
            current.append(task)
        else:
            blocks.append(current)
            current = [task]

    blocks.append(current)
    return blocks

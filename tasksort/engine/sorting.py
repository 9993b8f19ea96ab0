"""Task sorting for tasksort.

Sorts task lists with the multi-criterion comparator:
- ``sort_tasks``: one level, any task-like records (list and table views)
- ``sort_task_tree``: also sorts each record's ``children``
- ``sort_tasks_recursively``: in-place variant over TaskNodes, used per block

These functions are deterministic - same inputs (and ``now``) always produce the
same order.
"""

from datetime import datetime
from typing import Any, List, Mapping, MutableMapping, Optional, Sequence, TypeVar

from tasksort.engine.comparator import compare_key
from tasksort.engine.status_rank import StatusRankTable, build_status_rank_table
from tasksort.models.settings import SortCriterion, SortSettings
from tasksort.models.task import TaskNode

T = TypeVar("T")


def sort_tasks(
    tasks: Sequence[T],
    criteria: Sequence[SortCriterion],
    settings: SortSettings,
    now: Optional[datetime] = None,
) -> List[T]:
    """Sort task-like records at a single level.

    Records without a calculated status are ranked by their raw status mark.
    The input sequence is not modified.

    Args:
        tasks: Records to sort
        criteria: Sort criteria, most significant first
        settings: Settings snapshot used to build the status rank table
        now: Reference time for overdue checks

    Returns:
        New list in sorted order
    """
    rank_table = build_status_rank_table(settings)
    return sorted(tasks, key=compare_key(criteria, rank_table, now))


def _get_children(task: Any) -> Optional[List[Any]]:
    if isinstance(task, Mapping):
        return task.get("children")
    return getattr(task, "children", None)


def _set_children(task: Any, children: List[Any]) -> None:
    if isinstance(task, MutableMapping):
        task["children"] = children
    else:
        setattr(task, "children", children)


def _sort_levels(tasks: Sequence[T], key) -> List[T]:
    ordered = sorted(tasks, key=key)
    for task in ordered:
        children = _get_children(task)
        if children:
            _set_children(task, _sort_levels(children, key))
    return ordered


def sort_task_tree(
    tasks: Sequence[T],
    criteria: Sequence[SortCriterion],
    settings: SortSettings,
    now: Optional[datetime] = None,
) -> List[T]:
    """Sort records and, recursively, their ``children``.

    Returns a new top-level list; each record's ``children`` is replaced with
    its sorted counterpart. Children never move to another parent.
    """
    rank_table = build_status_rank_table(settings)
    return _sort_levels(tasks, compare_key(criteria, rank_table, now))


def sort_tasks_recursively(
    tasks: List[TaskNode],
    criteria: Sequence[SortCriterion],
    rank_table: StatusRankTable,
    now: Optional[datetime] = None,
) -> List[TaskNode]:
    """Sort TaskNodes in place, then each node's children, depth-first.

    Returns:
        The same list object, now sorted
    """
    key = compare_key(criteria, rank_table, now)

    def sort_level(nodes: List[TaskNode]) -> None:
        nodes.sort(key=key)
        for node in nodes:
            if node.children:
                sort_level(node.children)

    sort_level(tasks)
    return tasks

"""Sorting engine for tasksort."""

from tasksort.engine.status_cycles import (
    find_applicable_cycles,
    find_mark_by_status_name,
    find_primary_cycle,
    find_status_name_by_mark,
    get_all_marks,
    get_all_status_names,
    get_next_status,
    get_next_status_for_settings,
    get_next_status_primary,
    get_previous_status,
    get_previous_status_for_settings,
    get_previous_status_primary,
    get_stepping_cycles,
    get_task_status_config,
    resolve_cycle_source,
)
from tasksort.engine.status_rank import StatusRankTable, build_status_rank_table
from tasksort.engine.comparator import compare_key, compare_tasks
from tasksort.engine.hierarchy import build_task_hierarchy
from tasksort.engine.blocks import deepest_line, find_continuous_task_blocks
from tasksort.engine.sorting import sort_task_tree, sort_tasks, sort_tasks_recursively
from tasksort.engine.rewriter import RewriteResult, rewrite_sorted_blocks
from tasksort.engine.document import (
    SortOutcome,
    SortStatus,
    TextDocument,
    resolve_sort_range,
    sort_tasks_in_document,
)

__all__ = [
    "find_applicable_cycles",
    "find_mark_by_status_name",
    "find_primary_cycle",
    "find_status_name_by_mark",
    "get_all_marks",
    "get_all_status_names",
    "get_next_status",
    "get_next_status_for_settings",
    "get_next_status_primary",
    "get_previous_status",
    "get_previous_status_for_settings",
    "get_previous_status_primary",
    "get_stepping_cycles",
    "get_task_status_config",
    "resolve_cycle_source",
    "StatusRankTable",
    "build_status_rank_table",
    "compare_key",
    "compare_tasks",
    "build_task_hierarchy",
    "deepest_line",
    "find_continuous_task_blocks",
    "sort_task_tree",
    "sort_tasks",
    "sort_tasks_recursively",
    "RewriteResult",
    "rewrite_sorted_blocks",
    "SortOutcome",
    "SortStatus",
    "TextDocument",
    "resolve_sort_range",
    "sort_tasks_in_document",
]

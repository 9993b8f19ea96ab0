"""Status rank table construction for tasksort.

Folds the active status cycle, the calculated "overdue" status and the
completed/cancelled mark groups into one mark -> rank table. Lower rank sorts
first under an ascending status sort:

1. "overdue" always ranks 1
2. Non-terminal cycle marks follow in cycle order, starting at 2
3. Completed marks rank 98, cancelled marks rank 99
4. Marks nobody ranked default to 1000 at comparison time

This function is deterministic - same settings always produce the same table.
"""

import logging
from typing import List

from tasksort.engine.status_cycles import get_task_status_config
from tasksort.models.constants import (
    COMPLETE_MARK,
    DEFAULT_INCOMPLETE_RANK,
    FIRST_CYCLE_RANK,
    INCOMPLETE_MARK,
    OVERDUE_STATUS,
    RANK_CANCELLED,
    RANK_COMPLETED,
    RANK_OVERDUE,
    RANK_UNKNOWN,
)
from tasksort.models.settings import SortSettings

logger = logging.getLogger(__name__)


class StatusRankTable(dict):
    """Mark -> rank mapping; unknown marks rank ``RANK_UNKNOWN``."""

    def rank_of(self, mark: str) -> int:
        return self.get(mark, RANK_UNKNOWN)


class _RankAllocator:
    """Hands out sequential ranks and buckets terminal marks."""

    def __init__(self, table: StatusRankTable, completed: List[str], cancelled: List[str]):
        self.table = table
        self.completed = completed
        self.cancelled = cancelled
        self.next_rank = FIRST_CYCLE_RANK

    def classify(self, mark: str) -> None:
        if not mark or mark in self.table:
            return
        if mark in self.completed:
            self.table[mark] = RANK_COMPLETED
        elif mark in self.cancelled:
            self.table[mark] = RANK_CANCELLED
        else:
            self.table[mark] = self.next_rank
            self.next_rank += 1


def build_status_rank_table(settings: SortSettings) -> StatusRankTable:
    """Build the status rank table for a settings snapshot.

    Args:
        settings: Settings snapshot (status cycles and mark groups)

    Returns:
        StatusRankTable covering "overdue", every cycle mark, every grouped mark,
        " " and "x"
    """
    table = StatusRankTable()
    table[OVERDUE_STATUS] = RANK_OVERDUE

    allocator = _RankAllocator(
        table,
        completed=settings.task_statuses.completed_marks(),
        cancelled=settings.task_statuses.cancelled_marks(),
    )

    # Pass 1: the active cycle, in cycle order
    config = get_task_status_config(settings)
    excluded = set(config.exclude_marks_from_cycle)
    for status_name in config.cycle:
        if status_name in excluded:
            continue
        mark = config.marks.get(status_name)
        if mark is not None:
            allocator.classify(mark)

    # Pass 2: marks from the status groups that the cycle did not mention
    for marks in settings.task_statuses.groups().values():
        for mark in marks:
            allocator.classify(mark)

    # " " and "x" must always be ranked. The default incomplete rank can already
    # belong to a cycle mark when the cycle is long; take the next free rank then.
    if INCOMPLETE_MARK not in table:
        if DEFAULT_INCOMPLETE_RANK in table.values():
            table[INCOMPLETE_MARK] = allocator.next_rank
            allocator.next_rank += 1
        else:
            table[INCOMPLETE_MARK] = DEFAULT_INCOMPLETE_RANK
    if COMPLETE_MARK not in table:
        table[COMPLETE_MARK] = RANK_COMPLETED

    logger.debug(f"Built status rank table: {dict(table)}")
    return table

"""Status cycle resolution for tasksort.

Pure queries over prioritized status cycles: which cycles own a mark, what the
next/previous status is, and a single-cycle projection for code that predates
multiple cycles.

Every lookup is total: a missing answer is ``None`` (or an empty set), never an
exception.
"""

from typing import Dict, List, Optional, Sequence, Set

from tasksort.models.constants import LEGACY_CYCLE_ID, LEGACY_CYCLE_NAME
from tasksort.models.settings import SortSettings
from tasksort.models.status_cycle import (
    CycleSource,
    LegacyCycle,
    LegacyStatusConfig,
    MultiCycle,
    NextStatusResult,
    StatusCycle,
)


def _enabled_by_priority(status_cycles: Optional[Sequence[StatusCycle]]) -> List[StatusCycle]:
    """Enabled cycles ordered by priority, then by position in the input.

    The input position is an explicit secondary key so cycles sharing a priority
    number resolve the same way regardless of sort stability.
    """
    if not status_cycles:
        return []
    indexed = [(index, cycle) for index, cycle in enumerate(status_cycles) if cycle.enabled]
    indexed.sort(key=lambda item: (item[1].priority, item[0]))
    return [cycle for _, cycle in indexed]


def find_applicable_cycles(
    current_mark: str,
    status_cycles: Optional[Sequence[StatusCycle]],
) -> List[StatusCycle]:
    """Find all enabled cycles that contain a given mark.

    Args:
        current_mark: The current task checkbox mark (e.g. " ", "x", "/")
        status_cycles: All available status cycles

    Returns:
        Applicable cycles, highest priority (lowest number) first
    """
    return [
        cycle
        for cycle in _enabled_by_priority(status_cycles)
        if current_mark in cycle.marks.values()
    ]


def _step(current_mark: str, cycle: StatusCycle, offset: int) -> Optional[NextStatusResult]:
    if not cycle.cycle:
        return None

    current_status_name = None
    for status_name in cycle.cycle:
        if cycle.marks.get(status_name) == current_mark:
            current_status_name = status_name
            break

    if current_status_name is None:
        return None

    current_index = cycle.cycle.index(current_status_name)
    # Python's modulo wraps negative offsets too
    target_index = (current_index + offset) % len(cycle.cycle)
    target_name = cycle.cycle[target_index]

    return NextStatusResult(
        status_name=target_name,
        mark=cycle.marks.get(target_name),
        cycle=cycle,
    )


def get_next_status(current_mark: str, cycle: StatusCycle) -> Optional[NextStatusResult]:
    """Get the status after ``current_mark`` in ``cycle``, wrapping to the start.

    Returns:
        The next status, or None if no status in the cycle uses the mark
    """
    return _step(current_mark, cycle, 1)


def get_previous_status(current_mark: str, cycle: StatusCycle) -> Optional[NextStatusResult]:
    """Get the status before ``current_mark`` in ``cycle``, wrapping to the end.

    Returns:
        The previous status, or None if no status in the cycle uses the mark
    """
    return _step(current_mark, cycle, -1)


def find_primary_cycle(
    current_mark: str,
    status_cycles: Optional[Sequence[StatusCycle]],
) -> Optional[StatusCycle]:
    """Find the highest priority enabled cycle containing the mark."""
    applicable = find_applicable_cycles(current_mark, status_cycles)
    return applicable[0] if applicable else None


def get_next_status_primary(
    current_mark: str,
    status_cycles: Optional[Sequence[StatusCycle]],
) -> Optional[NextStatusResult]:
    primary = find_primary_cycle(current_mark, status_cycles)
    if primary is None:
        return None
    return get_next_status(current_mark, primary)


def get_previous_status_primary(
    current_mark: str,
    status_cycles: Optional[Sequence[StatusCycle]],
) -> Optional[NextStatusResult]:
    primary = find_primary_cycle(current_mark, status_cycles)
    if primary is None:
        return None
    return get_previous_status(current_mark, primary)


def get_all_status_names(status_cycles: Optional[Sequence[StatusCycle]]) -> Set[str]:
    """All unique status names across enabled cycles."""
    names: Set[str] = set()
    for cycle in status_cycles or []:
        if not cycle.enabled:
            continue
        names.update(cycle.cycle)
    return names


def get_all_marks(status_cycles: Optional[Sequence[StatusCycle]]) -> Set[str]:
    """All unique marks across enabled cycles."""
    marks: Set[str] = set()
    for cycle in status_cycles or []:
        if not cycle.enabled:
            continue
        marks.update(cycle.marks.values())
    return marks


def find_status_name_by_mark(
    mark: str,
    status_cycles: Optional[Sequence[StatusCycle]],
) -> Optional[str]:
    """Find the status name for a mark, checking cycles in priority order."""
    for cycle in _enabled_by_priority(status_cycles):
        for status_name, status_mark in cycle.marks.items():
            if status_mark == mark:
                return status_name
    return None


def find_mark_by_status_name(
    status_name: str,
    status_cycles: Optional[Sequence[StatusCycle]],
) -> Optional[str]:
    """Find the mark for a status name, checking cycles in priority order."""
    for cycle in _enabled_by_priority(status_cycles):
        if status_name in cycle.marks:
            return cycle.marks[status_name]
    return None


def is_mark_in_use(mark: str, status_cycles: Optional[Sequence[StatusCycle]]) -> bool:
    return find_status_name_by_mark(mark, status_cycles) is not None


def get_cycle_for_status(
    status_name: str,
    status_cycles: Optional[Sequence[StatusCycle]],
) -> Optional[StatusCycle]:
    """Find the highest priority enabled cycle that lists the status name."""
    for cycle in _enabled_by_priority(status_cycles):
        if status_name in cycle.cycle:
            return cycle
    return None


def resolve_cycle_source(settings: SortSettings) -> CycleSource:
    """Pick multi-cycle or flat single-cycle configuration, once.

    Multi-cycle mode applies as soon as at least one cycle is enabled.
    """
    enabled = _enabled_by_priority(settings.status_cycles)
    if enabled:
        return MultiCycle(cycles=enabled)
    return LegacyCycle(
        cycle=list(settings.task_status_cycle),
        marks=dict(settings.task_status_marks),
        exclude_marks_from_cycle=list(settings.exclude_marks_from_cycle),
    )


def get_task_status_config(
    settings: SortSettings,
    current_mark: Optional[str] = None,
) -> LegacyStatusConfig:
    """Get a single-cycle view of the status configuration.

    In multi-cycle mode, uses the primary cycle of ``current_mark`` when one
    contains it, otherwise the highest priority enabled cycle. Without enabled
    cycles, falls back to the flat settings.

    Args:
        settings: Settings snapshot
        current_mark: Optional task mark used to choose the cycle

    Returns:
        Legacy-compatible status configuration
    """
    source = resolve_cycle_source(settings)

    if isinstance(source, MultiCycle):
        chosen = None
        if current_mark is not None:
            chosen = find_primary_cycle(current_mark, source.cycles)
        if chosen is None:
            chosen = source.cycles[0]
        return LegacyStatusConfig(
            cycle=list(chosen.cycle),
            marks=dict(chosen.marks),
            exclude_marks_from_cycle=[],
            is_multi_cycle=True,
            current_cycle_id=chosen.id,
        )

    return LegacyStatusConfig(
        cycle=source.cycle,
        marks=source.marks,
        exclude_marks_from_cycle=source.exclude_marks_from_cycle,
        is_multi_cycle=False,
    )


def get_all_status_marks(settings: SortSettings) -> Dict[str, str]:
    """Map every known mark to the first status name that uses it.

    Cycles are visited in priority order, so a mark shared by several cycles
    keeps the name from the highest priority one.
    """
    unique: Dict[str, str] = {}
    source = resolve_cycle_source(settings)

    if isinstance(source, MultiCycle):
        for cycle in source.cycles:
            for name, mark in cycle.marks.items():
                unique.setdefault(mark, name)
    else:
        for name, mark in source.marks.items():
            unique.setdefault(mark, name)

    return unique


def get_stepping_cycles(settings: SortSettings) -> List[StatusCycle]:
    """Cycles a status can step through under the given settings.

    In multi-cycle mode these are the enabled cycles in priority order. Flat
    settings become a single cycle without the excluded status names.
    """
    source = resolve_cycle_source(settings)
    if isinstance(source, MultiCycle):
        return source.cycles

    excluded = set(source.exclude_marks_from_cycle)
    names = [name for name in source.cycle if name not in excluded]
    return [
        StatusCycle(
            id=LEGACY_CYCLE_ID,
            name=LEGACY_CYCLE_NAME,
            cycle=names,
            marks={name: source.marks[name] for name in names if name in source.marks},
        )
    ]


def get_next_status_for_settings(current_mark: str, settings: SortSettings) -> Optional[NextStatusResult]:
    return get_next_status_primary(current_mark, get_stepping_cycles(settings))


def get_previous_status_for_settings(current_mark: str, settings: SortSettings) -> Optional[NextStatusResult]:
    return get_previous_status_primary(current_mark, get_stepping_cycles(settings))

"""Multi-criterion task comparison for tasksort.

Compares two task-like records under an ordered list of sort criteria. Records
are open: pydantic models, dataclasses, plain objects or dicts all work. A field
is read from the record itself (snake_case or camelCase) and, failing that, from
its ``metadata``.

Field policies:
- Missing values (no priority, no date, empty text) sort last in BOTH directions.
- Dates already in the past sort first in BOTH directions, oldest first.
- Everything else honors the requested direction.

Full ties fall back to file path, then line, then id, so the result is
deterministic for identical inputs.
"""

import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime, time
from functools import cmp_to_key
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from tasksort.engine.status_rank import StatusRankTable
from tasksort.models.settings import SortCriterion, SortField, SortOrder


# Attribute/key names tried for each field, in order
_FIELD_NAMES: Dict[SortField, Tuple[str, ...]] = {
    SortField.STATUS: ("status",),
    SortField.COMPLETED: ("completed",),
    SortField.PRIORITY: ("priority",),
    SortField.DUE_DATE: ("due_date", "dueDate"),
    SortField.START_DATE: ("start_date", "startDate"),
    SortField.SCHEDULED_DATE: ("scheduled_date", "scheduledDate"),
    SortField.CREATED_DATE: ("created_date", "createdDate"),
    SortField.COMPLETED_DATE: ("completed_date", "completedDate"),
    SortField.CONTENT: ("content",),
    SortField.TAGS: ("tags",),
    SortField.PROJECT: ("project",),
    SortField.CONTEXT: ("context",),
    SortField.RECURRENCE: ("recurrence",),
    SortField.FILE_PATH: ("file_path", "filePath"),
    SortField.LINE_NUMBER: ("line",),
}

_CALCULATED_STATUS_NAMES = ("calculated_status", "calculatedStatus")
_LINE_NUMBER_NAMES = ("line_number", "lineNumber")

_DIGITS = re.compile(r"(\d+)")


@dataclass(frozen=True)
class _CompareContext:
    rank_table: StatusRankTable
    now_ms: float


# ---------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------

def _read(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _read_any(obj: Any, names: Sequence[str]) -> Any:
    for name in names:
        value = _read(obj, name)
        if value is not None:
            return value
    return None


def get_field(task: Any, field: SortField) -> Any:
    """Read a sort field from the record, falling back to its metadata."""
    names = _FIELD_NAMES[field]
    value = _read_any(task, names)
    if value is not None:
        return value
    return _read_any(_read(task, "metadata"), names)


# ---------------------------------------------------------------------
# Value normalization
# ---------------------------------------------------------------------

def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _directed(result: int, order: SortOrder) -> int:
    return result if order == SortOrder.ASC else -result


def to_timestamp_ms(value: Any) -> Optional[float]:
    """Convert a date-ish value to epoch milliseconds.

    Numbers are taken as epoch milliseconds already. Naive dates and datetimes
    are local time; date-only values mean local midnight.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        return value.timestamp() * 1000
    if isinstance(value, date):
        return datetime.combine(value, time()).timestamp() * 1000
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in "Zz":
            # fromisoformat only accepts "Z" from Python 3.11
            text = text[:-1] + "+00:00"
        try:
            return to_timestamp_ms(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def _to_priority(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(item) for item in value)
    text = str(value).strip()
    return text or None


def natural_key(text: str) -> Tuple[Tuple[int, int, str], ...]:
    """Case- and accent-insensitive sort key that orders embedded numbers numerically."""
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    key = []
    for index, part in enumerate(_DIGITS.split(folded)):
        if index % 2 == 1:
            key.append((0, int(part), ""))
        elif part:
            key.append((1, 0, part))
    return tuple(key)


def compare_text(a: str, b: str) -> int:
    """Collation-style comparison: base letters, natural numbers."""
    key_a = natural_key(a)
    key_b = natural_key(b)
    return (key_a > key_b) - (key_a < key_b)


def _missing_last(a_present: bool, b_present: bool) -> Optional[int]:
    """Ordering when at least one side lacks a value, else None."""
    if a_present and b_present:
        return None
    if not a_present and not b_present:
        return 0
    return 1 if not a_present else -1


# ---------------------------------------------------------------------
# Per-field strategies
# ---------------------------------------------------------------------

def _compare_status(a: Any, b: Any, order: SortOrder, ctx: _CompareContext) -> int:
    status_a = _read_any(a, _CALCULATED_STATUS_NAMES) or get_field(a, SortField.STATUS) or ""
    status_b = _read_any(b, _CALCULATED_STATUS_NAMES) or get_field(b, SortField.STATUS) or ""
    # Lower rank = earlier under ascending order
    diff = ctx.rank_table.rank_of(status_a) - ctx.rank_table.rank_of(status_b)
    return _directed(_sign(diff), order)


def _compare_completed(a: Any, b: Any, order: SortOrder, ctx: _CompareContext) -> int:
    completed_a = bool(get_field(a, SortField.COMPLETED))
    completed_b = bool(get_field(b, SortField.COMPLETED))
    if completed_a == completed_b:
        return 0
    # Ascending: open before completed
    return _directed(1 if completed_a else -1, order)


def _compare_priority(a: Any, b: Any, order: SortOrder, ctx: _CompareContext) -> int:
    priority_a = _to_priority(get_field(a, SortField.PRIORITY))
    priority_b = _to_priority(get_field(b, SortField.PRIORITY))
    missing = _missing_last(priority_a is not None, priority_b is not None)
    if missing is not None:
        return missing
    return _directed(_sign(priority_a - priority_b), order)


def _date_strategy(field: SortField) -> Callable[[Any, Any, SortOrder, _CompareContext], int]:
    def compare(a: Any, b: Any, order: SortOrder, ctx: _CompareContext) -> int:
        date_a = to_timestamp_ms(get_field(a, field))
        date_b = to_timestamp_ms(get_field(b, field))
        missing = _missing_last(date_a is not None, date_b is not None)
        if missing is not None:
            return missing

        a_overdue = date_a < ctx.now_ms
        b_overdue = date_b < ctx.now_ms
        if a_overdue and b_overdue:
            # Most overdue first, whatever the requested direction
            return _sign(date_a - date_b)
        if a_overdue != b_overdue:
            return -1 if a_overdue else 1
        return _directed(_sign(date_a - date_b), order)

    return compare


def _text_strategy(field: SortField) -> Callable[[Any, Any, SortOrder, _CompareContext], int]:
    def compare(a: Any, b: Any, order: SortOrder, ctx: _CompareContext) -> int:
        text_a = _to_text(get_field(a, field))
        text_b = _to_text(get_field(b, field))
        missing = _missing_last(text_a is not None, text_b is not None)
        if missing is not None:
            return missing
        return _directed(compare_text(text_a, text_b), order)

    return compare


def _compare_line_number(a: Any, b: Any, order: SortOrder, ctx: _CompareContext) -> int:
    line_a = _read(a, "line")
    line_b = _read(b, "line")
    if line_a is None:
        line_a = _read_any(a, _LINE_NUMBER_NAMES) or 0
    if line_b is None:
        line_b = _read_any(b, _LINE_NUMBER_NAMES) or 0
    return _directed(_sign(line_a - line_b), order)


_STRATEGIES: Dict[SortField, Callable[[Any, Any, SortOrder, _CompareContext], int]] = {
    SortField.STATUS: _compare_status,
    SortField.COMPLETED: _compare_completed,
    SortField.PRIORITY: _compare_priority,
    SortField.DUE_DATE: _date_strategy(SortField.DUE_DATE),
    SortField.START_DATE: _date_strategy(SortField.START_DATE),
    SortField.SCHEDULED_DATE: _date_strategy(SortField.SCHEDULED_DATE),
    SortField.CREATED_DATE: _date_strategy(SortField.CREATED_DATE),
    SortField.COMPLETED_DATE: _date_strategy(SortField.COMPLETED_DATE),
    SortField.CONTENT: _text_strategy(SortField.CONTENT),
    SortField.TAGS: _text_strategy(SortField.TAGS),
    SortField.PROJECT: _text_strategy(SortField.PROJECT),
    SortField.CONTEXT: _text_strategy(SortField.CONTEXT),
    SortField.RECURRENCE: _text_strategy(SortField.RECURRENCE),
    SortField.FILE_PATH: _text_strategy(SortField.FILE_PATH),
    SortField.LINE_NUMBER: _compare_line_number,
}

if set(_STRATEGIES) != set(SortField):
    raise RuntimeError(f"Missing sort strategies: {set(SortField) - set(_STRATEGIES)}")


# ---------------------------------------------------------------------
# Tie-break chain
# ---------------------------------------------------------------------

def _compare_identity_text(a: str, b: str) -> int:
    result = compare_text(a, b)
    if result == 0 and a != b:
        # Case/accent variants still need a fixed order
        result = (a > b) - (a < b)
    return result


def _tie_break(a: Any, b: Any) -> int:
    path_a = _read_any(a, _FIELD_NAMES[SortField.FILE_PATH]) or ""
    path_b = _read_any(b, _FIELD_NAMES[SortField.FILE_PATH]) or ""
    if path_a != path_b:
        return _compare_identity_text(str(path_a), str(path_b))

    line_a = _read(a, "line")
    line_b = _read(b, "line")
    if line_a is not None and line_b is not None:
        if line_a != line_b:
            return _sign(line_a - line_b)
    else:
        line_a = _read_any(a, _LINE_NUMBER_NAMES)
        line_b = _read_any(b, _LINE_NUMBER_NAMES)
        if line_a is not None and line_b is not None and line_a != line_b:
            return _sign(line_a - line_b)

    id_a = str(_read(a, "id") or "")
    id_b = str(_read(b, "id") or "")
    if id_a != id_b:
        return _compare_identity_text(id_a, id_b)
    return 0


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def _now_ms(now: Optional[datetime]) -> float:
    return (now or datetime.now()).timestamp() * 1000


def _compare(a: Any, b: Any, criteria: Sequence[SortCriterion], ctx: _CompareContext) -> int:
    for criterion in criteria:
        result = _STRATEGIES[criterion.field](a, b, criterion.order, ctx)
        if result != 0:
            return result
    return _tie_break(a, b)


def compare_tasks(
    task_a: Any,
    task_b: Any,
    criteria: Sequence[SortCriterion],
    rank_table: StatusRankTable,
    now: Optional[datetime] = None,
) -> int:
    """Compare two task-like records.

    Args:
        task_a: First record
        task_b: Second record
        criteria: Sort criteria, most significant first
        rank_table: Status rank table (see build_status_rank_table)
        now: Reference time for overdue checks (defaults to the current time)

    Returns:
        Negative if task_a sorts first, positive if task_b does, 0 if equal
    """
    ctx = _CompareContext(rank_table=rank_table, now_ms=_now_ms(now))
    return _compare(task_a, task_b, criteria, ctx)


def compare_key(
    criteria: Sequence[SortCriterion],
    rank_table: StatusRankTable,
    now: Optional[datetime] = None,
):
    """Build a ``key=`` callable for ``sorted``/``list.sort``.

    ``now`` is fixed once so every comparison in a sort agrees on it.
    """
    ctx = _CompareContext(rank_table=rank_table, now_ms=_now_ms(now))
    criteria = list(criteria)
    return cmp_to_key(lambda a, b: _compare(a, b, criteria, ctx))

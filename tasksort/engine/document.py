"""Document-level task sorting for tasksort.

Entry point used by editors and the HTTP API: pick the range to sort (the
heading section around the cursor, or the whole document), run the pipeline

    text -> hierarchy -> blocks -> sorted blocks -> rewritten text

and report either replacement text for an exact character range or why
nothing was replaced. Expected no-op conditions are reported through
``SortStatus``; they are never raised.
"""

import bisect
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel

from tasksort.engine.blocks import find_continuous_task_blocks
from tasksort.engine.hierarchy import LineParser, build_task_hierarchy
from tasksort.engine.rewriter import rewrite_sorted_blocks
from tasksort.engine.sorting import sort_tasks_recursively
from tasksort.engine.status_rank import build_status_rank_table
from tasksort.models.settings import SortSettings

logger = logging.getLogger(__name__)

_ATX_HEADING = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*#*[ \t]*$")
_SETEXT_UNDERLINE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
_FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d+[.)])(?:\s|$)")
_INDENTED_CODE = re.compile(r"^(?: {4}|\t)")
_FRONT_MATTER_OPEN = "---"
_FRONT_MATTER_CLOSE = ("---", "...")


class SortStatus(str, Enum):
    """Outcome of a document sort."""
    SORTED = "sorted"
    UNCHANGED = "unchanged"  # Tasks were already in order
    NO_TASKS = "no_tasks"
    DISABLED = "disabled"  # Sorting off or no criteria configured
    INVALID_RANGE = "invalid_range"


class SortOutcome(BaseModel):
    """Result of ``sort_tasks_in_document``.

    ``text``, ``from_offset`` and ``to_offset`` are set only when status is
    SORTED: replace ``document[from_offset:to_offset]`` with ``text``.
    """

    status: SortStatus
    text: Optional[str] = None
    from_offset: Optional[int] = None
    to_offset: Optional[int] = None
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    scope: str = ""
    message: str = ""


@dataclass(frozen=True)
class DocumentLine:
    number: int  # 0-based
    start: int  # offset of the first character
    end: int  # offset just past the last character (before "\n")
    text: str


@dataclass(frozen=True)
class Heading:
    level: int
    line: int  # 0-based
    text: str


@dataclass(frozen=True)
class SortRange:
    start_line: int
    end_line: int
    scope: str


class TextDocument:
    """Line accessor over an in-memory text.

    Lines are split on "\\n" with any trailing "\\r" removed, so line text never
    carries a line terminator. ``newline`` is the separator to write back with.
    """

    def __init__(self, text: str):
        self.text = text
        self.newline = "\r\n" if "\r\n" in text else "\n"
        self._lines: List[str] = []
        self._starts: List[int] = []
        offset = 0
        for raw in text.split("\n"):
            self._starts.append(offset)
            self._lines.append(raw[:-1] if raw.endswith("\r") else raw)
            offset += len(raw) + 1

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line(self, number: int) -> DocumentLine:
        """Get a line by 0-based number; raises IndexError when out of range."""
        if not 0 <= number < len(self._lines):
            raise IndexError(f"Line {number} out of range (document has {len(self._lines)} lines)")
        start = self._starts[number]
        text = self._lines[number]
        return DocumentLine(number=number, start=start, end=start + len(text), text=text)

    def line_at(self, offset: int) -> DocumentLine:
        """Get the line containing a character offset (clamped to the document)."""
        offset = max(0, min(offset, len(self.text)))
        return self.line(bisect.bisect_right(self._starts, offset) - 1)

    def slice(self, start: int, end: int) -> str:
        return self.text[start:end]

    def lines_text(self, start_line: int, end_line: int) -> str:
        """Lines start_line..end_line (inclusive) joined with "\\n"."""
        return "\n".join(self.line(number).text for number in range(start_line, end_line + 1))

    def front_matter_end(self) -> int:
        """First line after a leading YAML front matter block (0 if there is none)."""
        if not self._lines or self._lines[0].rstrip() != _FRONT_MATTER_OPEN:
            return 0
        for number in range(1, len(self._lines)):
            if self._lines[number].rstrip() in _FRONT_MATTER_CLOSE:
                return number + 1
        return 0

    def headings(self) -> List[Heading]:
        """ATX ("# Title") and setext ("Title" underlined with === or ---) headings.

        Fenced code blocks and a leading front matter block are skipped. A setext
        underline only counts below paragraph text, never below a list item.
        """
        headings: List[Heading] = []
        fence: Optional[str] = None
        paragraph: Optional[int] = None  # first line of the open paragraph
        in_list = False

        for number in range(self.front_matter_end(), len(self._lines)):
            line = self._lines[number]

            fence_match = _FENCE.match(line)
            if fence_match:
                marker = fence_match.group(1)
                if fence is None:
                    fence = marker[0] * len(marker)
                elif marker[0] == fence[0] and len(marker) >= len(fence):
                    fence = None
                paragraph = None
                continue
            if fence is not None:
                continue

            if not line.strip():
                paragraph = None
                in_list = False
                continue

            match = _ATX_HEADING.match(line)
            if match:
                headings.append(
                    Heading(level=len(match.group(1)), line=number, text=(match.group(2) or "").strip())
                )
                paragraph = None
                in_list = False
                continue

            underline = _SETEXT_UNDERLINE.match(line)
            if underline:
                if paragraph is not None:
                    text = " ".join(self._lines[n].strip() for n in range(paragraph, number))
                    level = 1 if underline.group(1).startswith("=") else 2
                    headings.append(Heading(level=level, line=paragraph, text=text))
                paragraph = None
                continue

            if _LIST_ITEM.match(line):
                in_list = True
                paragraph = None
            elif paragraph is None and not in_list and not _INDENTED_CODE.match(line):
                paragraph = number
        return headings


def resolve_sort_range(
    document: TextDocument,
    cursor: int = 0,
    full_document: bool = False,
    headings: Optional[Sequence[Heading]] = None,
) -> SortRange:
    """Choose the line range to sort.

    The heading section containing the cursor runs from that heading up to the
    line before the next heading of the same or higher level. Without an
    enclosing heading, or when forced, the whole document is used.
    """
    last_line = document.line_count - 1

    if full_document:
        return SortRange(0, last_line, "full document (forced)")

    cursor_line = document.line_at(cursor).number
    if headings is None:
        headings = document.headings()

    for index in range(len(headings) - 1, -1, -1):
        heading = headings[index]
        if heading.line > cursor_line:
            continue

        next_heading_line = document.line_count
        for following in headings[index + 1:]:
            if following.level <= heading.level:
                next_heading_line = following.line
                break

        end_line = max(next_heading_line - 1, heading.line)
        return SortRange(heading.line, end_line, f'heading section "{heading.text}"')

    return SortRange(0, last_line, "full document (cursor not in heading)")


def sort_tasks_in_document(
    document: Union[TextDocument, str],
    settings: SortSettings,
    *,
    cursor: int = 0,
    full_document: bool = False,
    file_path: str = "",
    headings: Optional[Sequence[Heading]] = None,
    line_parser: Optional[LineParser] = None,
    now: Optional[datetime] = None,
) -> SortOutcome:
    """Sort the tasks in the cursor's section (or the whole document).

    Args:
        document: Document text or accessor
        settings: Settings snapshot
        cursor: Character offset of the cursor
        full_document: Sort the whole document regardless of the cursor
        file_path: Source identifier handed to the line parser
        headings: Pre-computed headings (detected from the text when omitted)
        line_parser: Line parser override
        now: Reference time for overdue checks

    Returns:
        SortOutcome; only status SORTED carries replacement text
    """
    if isinstance(document, str):
        document = TextDocument(document)

    if not settings.sort_tasks or not settings.sort_criteria:
        return SortOutcome(
            status=SortStatus.DISABLED,
            message="Task sorting is disabled or no sort criteria are defined in settings.",
        )

    sort_range = resolve_sort_range(document, cursor, full_document, headings)
    start_line, end_line, scope = sort_range.start_line, sort_range.end_line, sort_range.scope
    lines_label = f"(Lines {start_line + 1}-{end_line + 1})"

    try:
        from_offset = document.line(start_line).start
        to_offset = document.line(end_line).end
        original_text = document.lines_text(start_line, end_line)
    except IndexError as e:
        logger.debug(f"Invalid sort range {start_line}-{end_line}: {e}")
        return SortOutcome(
            status=SortStatus.INVALID_RANGE,
            start_line=start_line,
            end_line=end_line,
            scope=scope,
            message=f"Invalid range calculated for {scope}.",
        )

    roots = build_task_hierarchy(
        original_text,
        start_line,
        file_path,
        settings.prefer_metadata_format,
        line_parser=line_parser,
        config=settings,
        today=now.date() if now else None,
    )
    if not roots:
        return SortOutcome(
            status=SortStatus.NO_TASKS,
            start_line=start_line,
            end_line=end_line,
            scope=scope,
            message=f"No tasks found in the {scope} {lines_label} to sort.",
        )

    blocks = find_continuous_task_blocks(roots)
    rank_table = build_status_rank_table(settings)
    for block in blocks:
        sort_tasks_recursively(block, settings.sort_criteria, rank_table, now)
    logger.debug(f"Sorted {len(blocks)} task blocks in the {scope} {lines_label}")

    result = rewrite_sorted_blocks(original_text, start_line, blocks)
    if not result.changed:
        return SortOutcome(
            status=SortStatus.UNCHANGED,
            start_line=start_line,
            end_line=end_line,
            scope=scope,
            message=f"Tasks are already sorted in the {scope} {lines_label}.",
        )

    return SortOutcome(
        status=SortStatus.SORTED,
        text=result.text.replace("\n", document.newline),
        from_offset=from_offset,
        to_offset=to_offset,
        start_line=start_line,
        end_line=end_line,
        scope=scope,
        message=f"Sorted tasks in the {scope} {lines_label}.",
    )

"""Checkbox task line parser for tasksort.

Recognizes list items with a checkbox (``- [ ] text``, ``* [x] text``,
``1. [/] text``) and extracts inline metadata in one of two syntaxes:

- tasks:    ``📅 2024-05-01`` due, ``🛫`` start, ``⏳`` scheduled, ``➕`` created,
            ``✅`` completed, ``🔺⏫🔼🔽⏬`` priority, ``🔁 every week`` recurrence
- dataview: ``[due:: 2024-05-01]``, ``[start::]``, ``[scheduled::]``,
            ``[created::]``, ``[completion::]``, ``[priority:: high]``,
            ``[repeat::]``, ``[project::]``, ``[context::]``

Both syntaxes also pick up ``#tags`` (``#project/name`` sets the project) and
``@context``. This module must be deterministic: same line -> same task.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Dict, Optional

from tasksort.models.constants import PRIORITY_EMOJI, PRIORITY_WORDS
from tasksort.models.settings import MetadataFormat, SortSettings
from tasksort.models.task import ParsedTask, TaskMetadata


_TASK_LINE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\[(.)\]\s?(.*)$")

_EMOJI_DATES: Dict[str, str] = {
    "📅": "due_date",
    "🛫": "start_date",
    "⏳": "scheduled_date",
    "➕": "created_date",
    "✅": "completed_date",
}
_EMOJI_DATE = re.compile(r"([📅🛫⏳➕✅])\ufe0f?\s*(\d{4}-\d{2}-\d{2})")
_EMOJI_PRIORITY = re.compile(r"([🔺⏫🔼🔽⏬])\ufe0f?")
_EMOJI_RECURRENCE = re.compile(r"🔁\ufe0f?\s*([^📅🛫⏳➕✅🔺⏫🔼🔽⏬#\[]*)")

_DATAVIEW_FIELD = re.compile(r"\[([A-Za-z][\w-]*)::\s*([^\]]*)\]")
_DATAVIEW_DATES: Dict[str, str] = {
    "due": "due_date",
    "start": "start_date",
    "scheduled": "scheduled_date",
    "created": "created_date",
    "completion": "completed_date",
}

_TAG = re.compile(r"(?<!\S)#([^\s#\[\]]+)")
_CONTEXT = re.compile(r"(?<!\S)@([\w][\w/-]*)")
_PROJECT_TAG_PREFIX = "project/"

_WHITESPACE = re.compile(r"\s+")


def _date_to_ms(value: str) -> Optional[int]:
    """Parse YYYY-MM-DD (optionally followed by a time) to local-midnight epoch ms."""
    try:
        parsed = date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
    return int(datetime.combine(parsed, time()).timestamp() * 1000)


def _parse_priority(value: str) -> Optional[int]:
    text = value.strip().lower()
    if not text:
        return None
    if text in PRIORITY_WORDS:
        return PRIORITY_WORDS[text]
    if text in PRIORITY_EMOJI:
        return PRIORITY_EMOJI[text]
    try:
        return int(text)
    except ValueError:
        return None


def _parse_tasks_format(body: str, fields: dict) -> str:
    for match in _EMOJI_DATE.finditer(body):
        millis = _date_to_ms(match.group(2))
        if millis is not None:
            fields.setdefault(_EMOJI_DATES[match.group(1)], millis)
    body = _EMOJI_DATE.sub(" ", body)

    priority = _EMOJI_PRIORITY.search(body)
    if priority:
        fields["priority"] = PRIORITY_EMOJI[priority.group(1)]
    body = _EMOJI_PRIORITY.sub(" ", body)

    recurrence = _EMOJI_RECURRENCE.search(body)
    if recurrence and recurrence.group(1).strip():
        fields["recurrence"] = recurrence.group(1).strip()
    return _EMOJI_RECURRENCE.sub(" ", body)


def _parse_dataview_format(body: str, fields: dict) -> str:
    for match in _DATAVIEW_FIELD.finditer(body):
        key = match.group(1).lower()
        value = match.group(2).strip()
        if key in _DATAVIEW_DATES:
            millis = _date_to_ms(value)
            if millis is not None:
                fields.setdefault(_DATAVIEW_DATES[key], millis)
        elif key == "priority":
            priority = _parse_priority(value)
            if priority is not None:
                fields["priority"] = priority
        elif key == "repeat" and value:
            fields["recurrence"] = value
        elif key in ("project", "context") and value:
            fields[key] = value
    return _DATAVIEW_FIELD.sub(" ", body)


def parse_task_line(
    file_path: str,
    line: str,
    line_number: int,
    metadata_format: MetadataFormat = MetadataFormat.TASKS,
    config: Optional[SortSettings] = None,
) -> Optional[ParsedTask]:
    """Parse a single line into a task.

    Args:
        file_path: Source identifier, used for the task id
        line: Raw line text
        line_number: 1-based line number
        metadata_format: Inline metadata syntax to read
        config: Settings snapshot (completed mark group); defaults apply if None

    Returns:
        ParsedTask, or None if the line is not a checkbox task
    """
    match = _TASK_LINE.match(line)
    if not match:
        return None

    mark, body = match.group(1), match.group(2)
    settings = config or SortSettings()

    fields: dict = {}
    if metadata_format == MetadataFormat.DATAVIEW:
        body = _parse_dataview_format(body, fields)
    else:
        body = _parse_tasks_format(body, fields)

    tags = _TAG.findall(body)
    for tag in tags:
        if tag.startswith(_PROJECT_TAG_PREFIX) and len(tag) > len(_PROJECT_TAG_PREFIX):
            fields.setdefault("project", tag[len(_PROJECT_TAG_PREFIX):])
            break
    context = _CONTEXT.search(body)
    if context:
        fields.setdefault("context", context.group(1))

    content = _WHITESPACE.sub(" ", body).strip()

    return ParsedTask(
        id=f"{file_path}-L{line_number}",
        status=mark,
        completed=mark in settings.task_statuses.completed_marks(),
        content=content,
        original_markdown=line,
        file_path=file_path,
        line=line_number,
        metadata=TaskMetadata(tags=[f"#{tag}" for tag in tags], **fields),
    )

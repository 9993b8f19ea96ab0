"""Constants for tasksort.

This module centralizes all magic numbers and default values used throughout the application.
"""


# Calculated status (not a raw checkbox mark)
OVERDUE_STATUS = "overdue"

# Status rank table
RANK_OVERDUE = 1
FIRST_CYCLE_RANK = 2  # First rank handed out to non-terminal cycle marks
DEFAULT_INCOMPLETE_RANK = 10  # " " when no cycle or status group ranks it
RANK_COMPLETED = 98
RANK_CANCELLED = 99
RANK_UNKNOWN = 1000  # Marks missing from the table sort after everything else

# Default status mark groups (pipe-delimited)
DEFAULT_COMPLETED_MARKS = "x|X"
DEFAULT_IN_PROGRESS_MARKS = ">|/"
DEFAULT_ABANDONED_MARKS = "-"
DEFAULT_PLANNED_MARKS = "?"
DEFAULT_NOT_STARTED_MARKS = " "

MARK_SEPARATOR = "|"

# Marks every rank table must contain
INCOMPLETE_MARK = " "
COMPLETE_MARK = "x"

# Default status cycle
DEFAULT_CYCLE_ID = "default-cycle"
DEFAULT_CYCLE_NAME = "Default Cycle"
LEGACY_CYCLE_ID = "legacy"  # Stepping view of the flat single-cycle settings
LEGACY_CYCLE_NAME = "Legacy Cycle"
DEFAULT_STATUS_CYCLE = [
    "Not Started",
    "In Progress",
    "Completed",
    "Abandoned",
    "Planned",
]
DEFAULT_STATUS_MARKS = {
    "Not Started": " ",
    "In Progress": "/",
    "Completed": "x",
    "Abandoned": "-",
    "Planned": "?",
}

# Priority markers (tasks emoji format); higher number = higher priority
PRIORITY_EMOJI = {
    "🔺": 5,  # highest
    "⏫": 4,  # high
    "🔼": 3,  # medium
    "🔽": 2,  # low
    "⏬": 1,  # lowest
}

# Priority words (dataview format)
PRIORITY_WORDS = {
    "highest": 5,
    "high": 4,
    "medium": 3,
    "low": 2,
    "lowest": 1,
}

"""Tests for the checkbox task line parser."""

from datetime import datetime

from tasksort.models.settings import MetadataFormat, SortSettings, TaskStatusMarks
from tasksort.parsers.task_line import parse_task_line


def _ms(year, month, day):
    return int(datetime(year, month, day).timestamp() * 1000)


class TestRecognition:
    """Test which lines are tasks."""

    def test_bullet_styles(self):
        for line in ("- [ ] a", "* [ ] a", "+ [ ] a", "1. [ ] a", "2) [ ] a", "    - [ ] a"):
            assert parse_task_line("f.md", line, 1) is not None, line

    def test_non_task_lines(self):
        for line in ("", "plain text", "- no checkbox", "[ ] no bullet", "# Heading"):
            assert parse_task_line("f.md", line, 1) is None, line

    def test_identity_fields(self):
        task = parse_task_line("notes/today.md", "  - [/] Draft outline", 12)
        assert task.id == "notes/today.md-L12"
        assert task.line == 12
        assert task.status == "/"
        assert task.file_path == "notes/today.md"
        assert task.original_markdown == "  - [/] Draft outline"
        assert task.content == "Draft outline"

    def test_completed_uses_completed_group(self):
        assert parse_task_line("f.md", "- [x] a", 1).completed
        assert parse_task_line("f.md", "- [X] a", 1).completed
        assert not parse_task_line("f.md", "- [/] a", 1).completed

    def test_custom_completed_group(self):
        settings = SortSettings(task_statuses=TaskStatusMarks(completed="d"))
        assert parse_task_line("f.md", "- [d] a", 1, config=settings).completed
        assert not parse_task_line("f.md", "- [x] a", 1, config=settings).completed


class TestTasksFormat:
    """Test emoji metadata."""

    def test_dates_priority_tags_context(self):
        line = "- [ ] Write report 📅 2024-05-01 ⏳ 2024-04-28 ⏫ #work @office"
        task = parse_task_line("f.md", line, 1)
        assert task.metadata.due_date == _ms(2024, 5, 1)
        assert task.metadata.scheduled_date == _ms(2024, 4, 28)
        assert task.metadata.priority == 4
        assert task.metadata.tags == ["#work"]
        assert task.metadata.context == "office"
        assert task.content == "Write report #work @office"

    def test_priority_levels(self):
        assert parse_task_line("f.md", "- [ ] a 🔺", 1).metadata.priority == 5
        assert parse_task_line("f.md", "- [ ] a ⏬", 1).metadata.priority == 1
        assert parse_task_line("f.md", "- [ ] a", 1).metadata.priority is None

    def test_recurrence(self):
        task = parse_task_line("f.md", "- [ ] Water plants 🔁 every week 📅 2024-05-01", 1)
        assert task.metadata.recurrence == "every week"
        assert task.metadata.due_date == _ms(2024, 5, 1)
        assert task.content == "Water plants"

    def test_project_tag(self):
        task = parse_task_line("f.md", "- [ ] a #project/garden #home", 1)
        assert task.metadata.project == "garden"
        assert task.metadata.tags == ["#project/garden", "#home"]

    def test_invalid_date_ignored(self):
        assert parse_task_line("f.md", "- [ ] a 📅 2024-13-45", 1).metadata.due_date is None

    def test_dataview_fields_ignored_in_tasks_format(self):
        task = parse_task_line("f.md", "- [ ] a [due:: 2024-05-01]", 1)
        assert task.metadata.due_date is None


class TestDataviewFormat:
    """Test inline [key:: value] fields."""

    def test_fields(self):
        line = "- [/] Plan launch [due:: 2024-05-01] [priority:: high] [project:: launch] [repeat:: every month]"
        task = parse_task_line("f.md", line, 1, MetadataFormat.DATAVIEW)
        assert task.metadata.due_date == _ms(2024, 5, 1)
        assert task.metadata.priority == 4
        assert task.metadata.project == "launch"
        assert task.metadata.recurrence == "every month"
        assert task.content == "Plan launch"

    def test_numeric_priority_and_completion(self):
        line = "- [x] Ship [priority:: 2] [completion:: 2024-06-02]"
        task = parse_task_line("f.md", line, 1, MetadataFormat.DATAVIEW)
        assert task.metadata.priority == 2
        assert task.metadata.completed_date == _ms(2024, 6, 2)

    def test_emoji_ignored_in_dataview_format(self):
        task = parse_task_line("f.md", "- [ ] a 📅 2024-05-01", 1, MetadataFormat.DATAVIEW)
        assert task.metadata.due_date is None

"""Tests for status cycle resolution."""

from tasksort.engine.status_cycles import (
    find_applicable_cycles,
    find_mark_by_status_name,
    find_primary_cycle,
    find_status_name_by_mark,
    get_all_marks,
    get_all_status_marks,
    get_all_status_names,
    get_cycle_for_status,
    get_next_status,
    get_next_status_for_settings,
    get_next_status_primary,
    get_previous_status,
    get_previous_status_for_settings,
    get_previous_status_primary,
    get_stepping_cycles,
    get_task_status_config,
    is_mark_in_use,
    resolve_cycle_source,
)
from tasksort.models.settings import SortSettings
from tasksort.models.status_cycle import LegacyCycle, MultiCycle, StatusCycle


class TestFindApplicableCycles:
    """Test find_applicable_cycles() ordering and filtering."""

    def test_sorted_by_priority(self, three_state_cycle, review_cycle):
        cycles = find_applicable_cycles("x", [review_cycle, three_state_cycle])
        assert [c.id for c in cycles] == ["simple", "review"]

    def test_only_cycles_containing_mark(self, three_state_cycle, review_cycle):
        cycles = find_applicable_cycles("r", [three_state_cycle, review_cycle])
        assert [c.id for c in cycles] == ["review"]

    def test_disabled_cycles_ignored(self, three_state_cycle, review_cycle):
        disabled = three_state_cycle.model_copy(update={"enabled": False})
        cycles = find_applicable_cycles("x", [disabled, review_cycle])
        assert [c.id for c in cycles] == ["review"]

    def test_priority_ties_keep_input_order(self, three_state_cycle):
        first = three_state_cycle.model_copy(update={"id": "first", "priority": 2})
        second = three_state_cycle.model_copy(update={"id": "second", "priority": 2})
        assert [c.id for c in find_applicable_cycles(" ", [first, second])] == ["first", "second"]
        assert [c.id for c in find_applicable_cycles(" ", [second, first])] == ["second", "first"]

    def test_empty_inputs(self):
        assert find_applicable_cycles("x", None) == []
        assert find_applicable_cycles("x", []) == []


class TestStepping:
    """Test next/previous status, including wrap-around."""

    def test_next_status(self, three_state_cycle):
        result = get_next_status(" ", three_state_cycle)
        assert result.status_name == "In Progress"
        assert result.mark == "/"
        assert result.cycle.id == "simple"

    def test_next_status_wraps(self, three_state_cycle):
        result = get_next_status("x", three_state_cycle)
        assert result.status_name == "Not Started"
        assert result.mark == " "

    def test_previous_status_wraps(self, three_state_cycle):
        result = get_previous_status(" ", three_state_cycle)
        assert result.status_name == "Completed"
        assert result.mark == "x"

    def test_previous_status(self, three_state_cycle):
        assert get_previous_status("/", three_state_cycle).mark == " "

    def test_unknown_mark_not_found(self, three_state_cycle):
        assert get_next_status("?", three_state_cycle) is None
        assert get_previous_status("?", three_state_cycle) is None

    def test_primary_variants_use_highest_priority_cycle(self, three_state_cycle, review_cycle):
        # "x" is in both; the simple cycle (priority 0) wins
        assert get_next_status_primary("x", [review_cycle, three_state_cycle]).mark == " "
        assert get_previous_status_primary("x", [review_cycle, three_state_cycle]).mark == "/"
        assert get_next_status_primary("r", [review_cycle, three_state_cycle]).mark == "x"

    def test_primary_variants_not_found(self, three_state_cycle):
        assert find_primary_cycle("?", [three_state_cycle]) is None
        assert get_next_status_primary("?", [three_state_cycle]) is None
        assert get_previous_status_primary("?", None) is None


class TestLookups:
    """Test unions and name/mark lookups."""

    def test_all_status_names(self, three_state_cycle, review_cycle):
        names = get_all_status_names([three_state_cycle, review_cycle])
        assert names == {"Not Started", "In Progress", "Completed", "Draft", "In Review", "Approved"}

    def test_all_marks_deduplicated(self, three_state_cycle, review_cycle):
        assert get_all_marks([three_state_cycle, review_cycle]) == {" ", "/", "x", "d", "r"}

    def test_unions_skip_disabled(self, three_state_cycle, review_cycle):
        disabled = review_cycle.model_copy(update={"enabled": False})
        assert "d" not in get_all_marks([three_state_cycle, disabled])
        assert "Draft" not in get_all_status_names([three_state_cycle, disabled])
        assert get_all_marks(None) == set()

    def test_status_name_by_mark_prefers_priority(self, three_state_cycle, review_cycle):
        assert find_status_name_by_mark("x", [review_cycle, three_state_cycle]) == "Completed"
        assert find_status_name_by_mark("?", [review_cycle, three_state_cycle]) is None

    def test_mark_by_status_name(self, three_state_cycle, review_cycle):
        assert find_mark_by_status_name("In Review", [three_state_cycle, review_cycle]) == "r"
        assert find_mark_by_status_name("Missing", [three_state_cycle, review_cycle]) is None

    def test_mark_in_use_and_cycle_for_status(self, three_state_cycle, review_cycle):
        assert is_mark_in_use("d", [three_state_cycle, review_cycle])
        assert not is_mark_in_use("?", [three_state_cycle, review_cycle])
        assert get_cycle_for_status("Approved", [three_state_cycle, review_cycle]).id == "review"
        assert get_cycle_for_status("Missing", [three_state_cycle]) is None


class TestTaskStatusConfig:
    """Test the single-cycle projection of the settings."""

    def test_uses_cycle_of_current_mark(self, three_state_cycle, review_cycle):
        settings = SortSettings(status_cycles=[three_state_cycle, review_cycle])
        config = get_task_status_config(settings, current_mark="r")
        assert config.is_multi_cycle
        assert config.current_cycle_id == "review"
        assert config.cycle == ["Draft", "In Review", "Approved"]

    def test_defaults_to_highest_priority_cycle(self, three_state_cycle, review_cycle):
        settings = SortSettings(status_cycles=[review_cycle, three_state_cycle])
        config = get_task_status_config(settings)
        assert config.current_cycle_id == "simple"
        assert config.exclude_marks_from_cycle == []

    def test_unknown_mark_falls_back_to_highest_priority(self, three_state_cycle, review_cycle):
        settings = SortSettings(status_cycles=[review_cycle, three_state_cycle])
        assert get_task_status_config(settings, current_mark="?").current_cycle_id == "simple"

    def test_legacy_fallback_without_enabled_cycles(self, three_state_cycle):
        settings = SortSettings(
            status_cycles=[three_state_cycle.model_copy(update={"enabled": False})],
            task_status_cycle=["Todo", "Done"],
            task_status_marks={"Todo": " ", "Done": "x"},
            exclude_marks_from_cycle=["Done"],
        )
        config = get_task_status_config(settings)
        assert not config.is_multi_cycle
        assert config.current_cycle_id is None
        assert config.cycle == ["Todo", "Done"]
        assert config.exclude_marks_from_cycle == ["Done"]

    def test_cycle_source_variant(self, three_state_cycle):
        assert isinstance(resolve_cycle_source(SortSettings(status_cycles=[three_state_cycle])), MultiCycle)
        assert isinstance(resolve_cycle_source(SortSettings(status_cycles=[])), LegacyCycle)


class TestAllStatusMarks:
    """Test get_all_status_marks() mark -> name mapping."""

    def test_first_name_wins_in_priority_order(self, three_state_cycle, review_cycle):
        settings = SortSettings(status_cycles=[review_cycle, three_state_cycle])
        marks = get_all_status_marks(settings)
        assert marks["x"] == "Completed"
        assert marks["d"] == "Draft"

    def test_legacy_marks(self):
        settings = SortSettings(status_cycles=[], task_status_marks={"Todo": " ", "Done": "x"})
        assert get_all_status_marks(settings) == {" ": "Todo", "x": "Done"}

    def test_model_accepts_camel_case_settings(self):
        cycle = StatusCycle(id="c", name="C", cycle=["A"], marks={"A": "a"})
        settings = SortSettings.model_validate({"statusCycles": [cycle.model_dump()]})
        assert settings.status_cycles[0].id == "c"


class TestSteppingWithSettings:
    """Test stepping through whichever cycle the settings resolve to."""

    def test_multi_cycle_uses_primary(self, three_state_cycle, review_cycle):
        settings = SortSettings(status_cycles=[review_cycle, three_state_cycle])
        assert [c.id for c in get_stepping_cycles(settings)] == ["simple", "review"]
        assert get_next_status_for_settings("x", settings).mark == " "
        assert get_previous_status_for_settings("r", settings).mark == "d"

    def test_flat_settings_without_enabled_cycles(self):
        settings = SortSettings(
            status_cycles=[],
            task_status_cycle=["Todo", "Doing", "Done"],
            task_status_marks={"Todo": " ", "Doing": ">", "Done": "x"},
        )
        result = get_next_status_for_settings(" ", settings)
        assert result.status_name == "Doing"
        assert result.mark == ">"
        assert result.cycle.id == "legacy"
        assert get_previous_status_for_settings(" ", settings).mark == "x"

    def test_flat_settings_skip_excluded_statuses(self):
        settings = SortSettings(
            status_cycles=[],
            task_status_cycle=["Todo", "Doing", "Done"],
            task_status_marks={"Todo": " ", "Doing": ">", "Done": "x"},
            exclude_marks_from_cycle=["Doing"],
        )
        assert get_stepping_cycles(settings)[0].cycle == ["Todo", "Done"]
        assert get_next_status_for_settings(" ", settings).mark == "x"
        assert get_next_status_for_settings(">", settings) is None

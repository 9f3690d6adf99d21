"""Tests for the tasks command group.

Commands run end to end through CliRunner against a JSON store inside a
temporary config/data directory.
"""
# pylint: disable=redefined-outer-name

import json

import pytest
from typer.testing import CliRunner

from worklog_cli.main import app
from worklog_cli.models import TaskStatus
from worklog_cli.services.config_service import get_task_store

from helpers import strip_ansi

runner = CliRunner()


@pytest.fixture(autouse=True)
def _config(tmp_config):
    return tmp_config


def invoke(*args: str, **kwargs):
    return runner.invoke(app, list(args), **kwargs)


def add(title: str, *options: str) -> str:
    result = invoke("tasks", "add", title, *options)
    assert result.exit_code == 0, result.output
    return get_task_store().tasks[-1].id


def task(task_id: str):
    return get_task_store().get_task_by_id(task_id)


class TestAdd:
    def test_add_minimal(self):
        result = invoke("tasks", "add", "Write docs")
        assert result.exit_code == 0
        assert "Task created: Write docs" in strip_ansi(result.output)
        tasks = get_task_store().tasks
        assert [t.title for t in tasks] == ["Write docs"]
        assert tasks[0].status == TaskStatus.TODO

    def test_add_with_options(self):
        task_id = add(
            "Design",
            "--alias", "design-long-alias",
            "--main", "Development",
            "--sub", "Frontend",
            "--start", "2025-03-03",
            "--end", "2025-03-07 17:00",
            "--assignee", "sam",
            "--label", "ui",
            "--label", "q1",
        )
        created = task(task_id)
        assert created.alias_title == "design-lon"
        assert (created.main_category, created.sub_category) == ("Development", "Frontend")
        assert created.estimated_start_date == 1_740_960_000_000
        assert created.estimated_end_date == 1_740_960_000_000 + (4 * 24 + 17) * 3_600_000
        assert created.assignee == "sam"
        assert created.labels == ["ui", "q1"]

    def test_child_by_suffix_inherits_categories(self):
        parent_id = add("Parent", "--main", "Development", "--sub", "Backend")
        child_id = add("Child", "--parent", parent_id[-6:])
        child = task(child_id)
        assert child.parent_id == parent_id
        assert (child.main_category, child.sub_category) == ("Development", "Backend")

    def test_unknown_parent(self):
        result = invoke("tasks", "add", "Orphan", "--parent", "nope")
        assert result.exit_code == 5
        assert "No task found" in strip_ansi(result.output)
        assert get_task_store().tasks == []

    def test_depth_limit(self):
        parent = add("L1")
        for level in range(2, 6):
            parent = add(f"L{level}", "--parent", parent)
        result = invoke("tasks", "add", "L6", "--parent", parent)
        assert result.exit_code == 2
        assert "maximum depth" in strip_ansi(result.output)

    def test_invalid_date(self):
        result = invoke("tasks", "add", "Bad", "--start", "tomorrow")
        assert result.exit_code == 2
        assert "Invalid date/time" in strip_ansi(result.output)

    def test_in_progress_status_takes_over_the_timer(self):
        first = add("First")
        assert invoke("timer", "start", first).exit_code == 0
        second = add("Second", "--status", "IN_PROGRESS")
        assert task(first).status == TaskStatus.PAUSED
        assert task(second).status == TaskStatus.IN_PROGRESS
        assert task(second).open_log() is not None
        assert get_task_store().active_task().id == second

    def test_blank_title(self):
        assert invoke("tasks", "add", "   ").exit_code == 2


class TestList:
    def test_empty(self):
        result = invoke("tasks", "list")
        assert result.exit_code == 0
        assert "No tasks found" in strip_ansi(result.output)

    def test_table_shows_wbs_numbers(self):
        parent = add("Alpha")
        add("Beta", "--parent", parent)
        out = strip_ansi(invoke("tasks", "list").output)
        assert "Alpha" in out
        assert "Beta" in out
        assert "1.1" in out

    def test_json_includes_index_and_depth(self):
        parent = add("Alpha")
        add("Beta", "--parent", parent)
        result = invoke("tasks", "list", "-o", "json")
        rows = json.loads(result.output)
        assert [(r["index"], r["depth"], r["title"]) for r in rows] == [
            ("1", 1, "Alpha"),
            ("1.1", 2, "Beta"),
        ]
        assert "timeLogs" in rows[0]

    def test_done_hidden_unless_all(self):
        add("Open")
        done = add("Finished", "--status", "DONE")
        titles = [r["title"] for r in json.loads(invoke("tasks", "list", "-o", "json").output)]
        assert titles == ["Open"]
        rows = json.loads(invoke("tasks", "list", "--all", "-o", "json").output)
        assert done in [r["id"] for r in rows]

    def test_status_filter(self):
        add("Open")
        add("Finished", "--status", "DONE")
        rows = json.loads(invoke("tasks", "list", "--status", "DONE", "-o", "json").output)
        assert [r["title"] for r in rows] == ["Finished"]

    def test_category_label_and_search_filters(self):
        add("Build API", "--main", "Development", "--label", "api")
        add("Standup", "--main", "Meeting")
        add("Misc")
        by_main = json.loads(invoke("tasks", "list", "--main", "Other", "-o", "json").output)
        assert [r["title"] for r in by_main] == ["Misc"]
        by_label = json.loads(invoke("tasks", "list", "--label", "api", "-o", "json").output)
        assert [r["title"] for r in by_label] == ["Build API"]
        by_search = json.loads(invoke("tasks", "list", "--search", "stand", "-o", "json").output)
        assert [r["title"] for r in by_search] == ["Standup"]

    def test_yaml_output(self):
        add("Alpha")
        result = invoke("tasks", "list", "-o", "yaml")
        assert "title: Alpha" in result.output

    def test_unknown_output_format(self):
        result = invoke("tasks", "list", "-o", "xml")
        assert result.exit_code == 2


class TestTreeAndShow:
    def test_tree(self):
        parent = add("Root task")
        add("Leaf task", "--parent", parent)
        out = strip_ansi(invoke("tasks", "tree").output)
        assert "Root task" in out
        assert "Leaf task" in out

    def test_show_json(self):
        task_id = add("Detail", "--description", "More text")
        data = json.loads(invoke("tasks", "show", task_id, "-o", "json").output)
        assert data["id"] == task_id
        assert data["description"] == "More text"

    def test_show_table_with_logs_and_outputs(self):
        task_id = add("Detail")
        assert invoke("logs", "add", task_id, "--start", "2025-03-03 09:00", "--end", "2025-03-03 10:00").exit_code == 0
        assert invoke("outputs", "add", task_id, "Report").exit_code == 0
        out = strip_ansi(invoke("tasks", "show", task_id).output)
        assert "Time logs" in out
        assert "Outputs" in out
        assert "1h 0m 0s" in out

    def test_show_actual_dates_come_from_logs(self):
        task_id = add("Detail")
        invoke("logs", "add", task_id, "--start", "2025-03-05 11:00", "--end", "2025-03-05 12:00")
        invoke("logs", "add", task_id, "--start", "2025-03-03 09:00", "--end", "2025-03-03 10:00")
        out = strip_ansi(invoke("tasks", "show", task_id).output)
        assert "2025-03-03 09:00" in out.split("Time logs")[0]
        assert "2025-03-05 12:00" not in out.split("Time logs")[0]

        assert invoke("tasks", "edit", task_id, "--status", "DONE").exit_code == 0
        out = strip_ansi(invoke("tasks", "show", task_id).output)
        assert "2025-03-05 12:00" in out.split("Time logs")[0]

    def test_show_unknown(self):
        result = invoke("tasks", "show", "missing")
        assert result.exit_code == 5


class TestEdit:
    def test_edit_fields(self):
        task_id = add("Old title")
        result = invoke("tasks", "edit", task_id, "--title", "New title", "--status", "DONE")
        assert result.exit_code == 0
        assert "Task updated: New title" in strip_ansi(result.output)
        assert task(task_id).status == TaskStatus.DONE

    def test_clear_estimate_and_detach(self):
        parent = add("Parent")
        child = add("Child", "--parent", parent, "--start", "2025-03-03")
        result = invoke("tasks", "edit", child, "--start", "none", "--parent", "none")
        assert result.exit_code == 0
        edited = task(child)
        assert edited.estimated_start_date is None
        assert edited.parent_id is None

    def test_move_under_descendant_is_rejected(self):
        parent = add("Parent")
        child = add("Child", "--parent", parent)
        result = invoke("tasks", "edit", parent, "--parent", child)
        assert result.exit_code == 2
        assert task(parent).parent_id is None

    def test_move_under_self_is_rejected(self):
        task_id = add("Solo")
        assert invoke("tasks", "edit", task_id, "--parent", task_id).exit_code == 2

    def test_move_to_new_parent(self):
        a = add("A")
        b = add("B")
        assert invoke("tasks", "edit", b, "--parent", a).exit_code == 0
        assert task(b).parent_id == a

    def test_labels(self):
        task_id = add("Tagged", "--label", "x")
        invoke("tasks", "edit", task_id, "--label", "y", "--label", "z")
        assert task(task_id).labels == ["y", "z"]
        invoke("tasks", "edit", task_id, "--clear-labels")
        assert task(task_id).labels == []

    def test_nothing_to_change(self):
        task_id = add("Same")
        result = invoke("tasks", "edit", task_id)
        assert result.exit_code == 0
        assert "Nothing to change" in strip_ansi(result.output)


class TestDelete:
    def test_delete_subtree(self):
        parent = add("Parent")
        add("Child", "--parent", parent)
        keep = add("Keep")
        result = invoke("tasks", "delete", parent, "--yes")
        assert result.exit_code == 0
        assert "Deleted 2 task(s)" in strip_ansi(result.output)
        assert [t.id for t in get_task_store().tasks] == [keep]

    def test_declined_confirmation_keeps_task(self):
        task_id = add("Precious")
        result = invoke("tasks", "delete", task_id, input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in strip_ansi(result.output)
        assert task(task_id) is not None

    def test_confirmation_mentions_subtasks(self):
        parent = add("Parent")
        add("Child", "--parent", parent)
        result = invoke("tasks", "delete", parent, input="y\n")
        assert "1 subtask(s)" in result.output
        assert get_task_store().tasks == []

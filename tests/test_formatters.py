"""Tests for the UI formatters."""

import json

import pytest
import yaml

from worklog_cli.utils.ui.formatters import (
    format_dict_table,
    format_duration_minutes,
    format_elapsed,
    format_error,
    format_hours_minutes,
    format_output,
    format_single_item,
    format_success,
    format_table,
    render_progress_bar,
)


def test_format_output_json(capsys):
    """JSON output goes straight to stdout."""
    format_output({"title": "Café", "minutes": 5}, "json")
    assert json.loads(capsys.readouterr().out) == {"title": "Café", "minutes": 5}


def test_format_output_yaml_keeps_order(capsys):
    format_output({"b": 1, "a": [1, 2]}, "yaml")
    out = capsys.readouterr().out
    assert yaml.safe_load(out) == {"b": 1, "a": [1, 2]}
    assert out.index("b:") < out.index("a:")


def test_format_table_empty(capsys):
    format_table([])
    assert "No data to display" in capsys.readouterr().out


def test_format_dict_table_with_boolean_and_list_values(capsys):
    """Booleans become check marks and lists are joined."""
    format_dict_table([{"id": "1", "done": True, "labels": ["work", "urgent"]}])
    out = capsys.readouterr().out
    assert "✓" in out
    assert "work, urgent" in out


def test_format_dict_table_escapes_markup(capsys):
    """Bracketed text in values is shown literally."""
    format_dict_table([{"title": "[bold]not bold[/bold]"}])
    assert "[bold]not bold[/bold]" in capsys.readouterr().out


def test_format_single_item_none_value(capsys):
    format_single_item({"parent_id": None})
    out = capsys.readouterr().out
    assert "Parent Id" in out
    assert "-" in out


def test_messages_escape_markup(capsys):
    format_error("No task found with ID or suffix '[x]'")
    format_success("done")
    out = capsys.readouterr().out
    assert "Error:" in out
    assert "'[x]'" in out
    assert "Success: done" in out


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [(0, "0m"), (-3, "0m"), (5, "5m"), (60, "1h"), (125, "2h 5m"), (1440 + 65, "1d 1h 5m")],
)
def test_format_duration_minutes(minutes, expected):
    assert format_duration_minutes(minutes) == expected


def test_format_elapsed():
    assert format_elapsed(3_723_000) == "1h 2m 3s"
    assert format_elapsed(-5) == "0h 0m 0s"


def test_format_hours_minutes():
    assert format_hours_minutes(90 * 60_000 + 59_999) == "1h 30m"


@pytest.mark.parametrize(
    ("value", "max_value", "expected"),
    [(0, 10, "░░░░"), (5, 10, "██░░"), (20, 10, "████"), (3, 0, "░░░░")],
)
def test_render_progress_bar(value, max_value, expected):
    assert render_progress_bar(value, max_value, width=4) == expected

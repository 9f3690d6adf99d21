"""Tests for the outputs command group."""
# pylint: disable=redefined-outer-name

import pytest
from typer.testing import CliRunner

from worklog_cli.main import app
from worklog_cli.services.config_service import get_task_store

from helpers import strip_ansi

runner = CliRunner()


@pytest.fixture(autouse=True)
def _config(tmp_config):
    return tmp_config


@pytest.fixture()
def task_id() -> str:
    assert runner.invoke(app, ["tasks", "add", "Deliver"]).exit_code == 0
    return get_task_store().tasks[-1].id


def invoke(*args: str):
    return runner.invoke(app, list(args))


def outputs(task_id: str):
    return get_task_store().get_task_by_id(task_id).outputs


def test_add_output(task_id):
    result = invoke("outputs", "add", task_id, "Design draft", "--link", "https://example.com/design", "-c", "40")
    assert result.exit_code == 0
    assert "Design draft" in strip_ansi(result.output)
    [out] = outputs(task_id)
    assert (out.name, out.link, out.completeness) == ("Design draft", "https://example.com/design", "40")


def test_add_clamps_completeness(task_id):
    invoke("outputs", "add", task_id, "Overdone", "-c", "250")
    assert outputs(task_id)[0].completeness == "100"


def test_add_blank_name(task_id):
    assert invoke("outputs", "add", task_id, "  ").exit_code == 2


def test_edit_output(task_id):
    invoke("outputs", "add", task_id, "Draft", "--link", "/tmp/draft.md")
    out_id = outputs(task_id)[0].id
    result = invoke("outputs", "edit", task_id, out_id[-6:], "--name", "Final", "--link", "", "--completeness=-10")
    assert result.exit_code == 0
    assert "Output updated: Final (0%)" in strip_ansi(result.output)
    edited = outputs(task_id)[0]
    assert edited.link is None
    assert edited.completeness == "0"


def test_edit_nothing(task_id):
    invoke("outputs", "add", task_id, "Draft")
    out_id = outputs(task_id)[0].id
    assert "Nothing to change" in strip_ansi(invoke("outputs", "edit", task_id, out_id).output)


def test_edit_unknown_output(task_id):
    assert invoke("outputs", "edit", task_id, "nope", "--name", "x").exit_code == 5


def test_delete_output(task_id):
    invoke("outputs", "add", task_id, "Draft")
    out_id = outputs(task_id)[0].id
    result = invoke("outputs", "delete", task_id, out_id)
    assert result.exit_code == 0
    assert outputs(task_id) == []

"""
Tests for the command-line interface.

Commands run through Typer's CliRunner against an in-memory repository and an
HTTP generator backed by httpx.MockTransport.
"""

import json

import httpx
import pytest
from typer.testing import CliRunner

from focusfit import cli
from focusfit.generator import HttpTextGenerator

runner = CliRunner()


@pytest.fixture
def wired_cli(monkeypatch, repository, payload_factory):
    """Point the CLI at the test repository and a canned completion."""
    reply = json.dumps(payload_factory(["vegan"]))

    def handler(request):
        return httpx.Response(200, json={"choices": [{"message": {"content": reply}}]})

    monkeypatch.setattr(cli, "configure_logging", lambda settings: None)
    monkeypatch.setattr(cli, "_repository", lambda: repository)
    monkeypatch.setattr(
        cli,
        "_generator",
        lambda: HttpTextGenerator(
            "https://llm.example.com/v1", "m",
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        ),
    )
    return repository


def test_options_lists_choices(wired_cli):
    result = runner.invoke(cli.app, ["options"])

    assert result.exit_code == 0
    assert "starting_is_hard" in result.output
    assert "gluten_free" in result.output


def test_plan_json(wired_cli):
    result = runner.invoke(cli.app, ["plan", "--hurdle", "time_blindness", "--diet", "vegan", "--json"])

    assert result.exit_code == 0
    assert '"provenance": "model_generated"' in result.output
    assert '"workout-2"' in result.output


def test_onboard_then_complete(wired_cli):
    result = runner.invoke(cli.app, ["onboard", "user_007", "--hurdle", "forgetting_to_eat"])
    assert result.exit_code == 0

    plan_id = wired_cli.get_current_plan_id("user_007")
    assert plan_id is not None

    result = runner.invoke(cli.app, ["complete", "user_007", "meal-1"])
    assert result.exit_code == 0
    assert "Dopamine win logged" in result.output
    assert wired_cli.get_plan(plan_id).meals[1].is_completed
    assert len(wired_cli.get_dopamine_wins("user_007")) == 1


def test_completing_done_task_logs_no_new_win(wired_cli):
    runner.invoke(cli.app, ["onboard", "user_007"])
    runner.invoke(cli.app, ["complete", "user_007", "workout-0"])

    result = runner.invoke(cli.app, ["complete", "user_007", "workout-0"])

    assert result.exit_code == 0
    assert "Dopamine win logged" not in result.output
    assert "already done" in result.output
    assert len(wired_cli.get_dopamine_wins("user_007")) == 1


def test_show_without_plan_exits_nonzero(wired_cli):
    result = runner.invoke(cli.app, ["show", "nobody"])

    assert result.exit_code == 1


def test_complete_unknown_task_exits_nonzero(wired_cli):
    runner.invoke(cli.app, ["onboard", "user_007"])

    result = runner.invoke(cli.app, ["complete", "user_007", "workout-7"])

    assert result.exit_code == 1

"""Tests for the awful-search CLI."""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from awful_search.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _drop_cli_log_sink() -> Iterator[None]:
    """The CLI logs to the runner's stderr, which is gone after each invoke."""
    yield
    logger.remove()


def test_kinds_lists_every_kind() -> None:
    result = runner.invoke(app, ["kinds"])
    assert result.exit_code == 0, result.output
    assert "USER_ID" in result.output
    assert "Thread title" in result.output
    assert "uses your username" in result.output


def test_query_builds_text_and_filters() -> None:
    result = runner.invoke(app, ["query", "foo bar", "--filter", "user_id=5"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "foo bar userid:5"


def test_query_accepts_labels_and_fixed_kinds() -> None:
    result = runner.invoke(
        app,
        ["query", "-f", "Thread title=goons", "-f", "MY_USERNAME", "--username", "Lowtax"],
    )
    assert result.exit_code == 0, result.output
    assert result.output.strip() == 'intitle:"goons" username:"Lowtax"'


def test_query_json_output() -> None:
    result = runner.invoke(app, ["query", "cats", "-f", "THREAD_ID=9", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["query"] == "cats threadid:9"
    assert data["filters"] == [
        {"kind": "THREAD_ID", "parameter": "9", "label": "Thread ID", "rendered": "threadid:9"}
    ]


def test_query_without_anything_fails() -> None:
    result = runner.invoke(app, ["query"])
    assert result.exit_code == 1


def test_query_unknown_kind_fails() -> None:
    result = runner.invoke(app, ["query", "x", "-f", "SHOE_SIZE=11"])
    assert result.exit_code == 1


def test_query_save_then_load(tmp_path: Path) -> None:
    saved = tmp_path / "filters" / "saved.json"
    result = runner.invoke(
        app, ["query", "-f", "username=Kyoon", "-f", "before=2012-01-01", "--save", str(saved)]
    )
    assert result.exit_code == 0, result.output
    assert saved.exists()

    result = runner.invoke(app, ["query", "pie", "--load", str(saved)])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == 'pie username:"Kyoon" before:"2012-01-01"'


def test_query_load_missing_file_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["query", "x", "--load", str(tmp_path / "nope.json")])
    assert result.exit_code == 1

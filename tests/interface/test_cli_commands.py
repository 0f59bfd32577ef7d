"""Tests for CLI commands: help, stats, review, config."""

import json

import httpx
import pytest
import yaml
from typer.testing import CliRunner

from flashrep.infrastructure.adapters.analytics import HttpAnalyticsSink
from flashrep.interface.cli import app

runner = CliRunner()

DECK = {
    "cards": [
        {"id": "c1", "question": "Capital of France?", "answer": "Paris"},
        {"id": "c2", "question": "2 + 3?", "answer": "5", "hints": ["add"]},
        {
            "id": "c3",
            "question": "Later card",
            "answer": "Not yet",
            "reviewCount": 7,
            "nextReview": "2999-01-01T00:00:00Z",
        },
    ]
}


@pytest.fixture
def deck_file(tmp_path, mock_home):
    path = tmp_path / "deck.yaml"
    path.write_text(yaml.safe_dump(DECK, sort_keys=False), encoding="utf-8")
    return path


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "review" in result.stdout
    assert "stats" in result.stdout
    assert "config" in result.stdout


# --- Stats ---


def test_stats_json(deck_file):
    result = runner.invoke(app, ["stats", str(deck_file), "--json"])

    assert result.exit_code == 0, result.stdout
    assert json.loads(result.stdout) == {
        "total": 3,
        "due": 2,
        "new": 2,
        "learning": 0,
        "reviewing": 1,
    }


def test_stats_table(deck_file):
    result = runner.invoke(app, ["stats", str(deck_file)])
    assert result.exit_code == 0
    assert "Total" in result.stdout
    assert "Reviewing" in result.stdout


def test_stats_without_deck_fails(mock_home):
    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 2


def test_stats_invalid_deck(tmp_path, mock_home):
    path = tmp_path / "bad.yaml"
    path.write_text("cards: [oops", encoding="utf-8")

    result = runner.invoke(app, ["stats", str(path)])

    assert result.exit_code == 1


# --- Review ---


def test_review_session_updates_deck(deck_file):
    # reveal, rate 5, reveal, rate 1
    result = runner.invoke(app, ["review", str(deck_file)], input="\n5\n\n1\n")

    assert result.exit_code == 0, result.stdout
    assert "2 of 3 cards due." in result.stdout
    assert "Capital of France?" in result.stdout
    assert "Hint: add" in result.stdout
    assert "Reviewed 2 card(s), accuracy 50%." in result.stdout

    cards = yaml.safe_load(deck_file.read_text(encoding="utf-8"))["cards"]
    by_id = {c["id"]: c for c in cards}
    assert by_id["c1"]["reviewCount"] == 1
    assert by_id["c1"]["easeFactor"] == 2.6
    assert by_id["c2"]["reviewCount"] == 1
    assert by_id["c2"]["repetition"] == 0
    assert by_id["c3"]["reviewCount"] == 7


def test_review_reprompts_on_invalid_quality(deck_file):
    result = runner.invoke(app, ["review", str(deck_file), "--limit", "1"], input="\n9\n4\n")

    assert result.exit_code == 0, result.stdout
    assert "Quality must be an integer between 1 and 5" in result.stdout
    assert "Reviewed 1 card(s)" in result.stdout


def test_review_quit_early(deck_file):
    result = runner.invoke(app, ["review", str(deck_file)], input="\nq\n")

    assert result.exit_code == 0, result.stdout
    assert "Reviewed 0 card(s)" in result.stdout


def test_review_nothing_due(tmp_path, mock_home):
    path = tmp_path / "deck.yaml"
    path.write_text(
        yaml.safe_dump({"cards": [DECK["cards"][2]]}), encoding="utf-8"
    )

    result = runner.invoke(app, ["review", str(path)])

    assert result.exit_code == 0
    assert "0 of 1 cards due." in result.stdout


# --- Config ---


def test_config_show(mock_home, monkeypatch):
    monkeypatch.setenv("FLASHREP_USER_ID", "alice")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["user_id"] == "alice"
    assert output["analytics_backend"] == "log"


def test_review_with_http_analytics_closes_client(deck_file, monkeypatch):
    from flashrep.application import factory

    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path == "/analytics/sessions":
            return httpx.Response(200, json={"sessionId": "remote-1"})
        return httpx.Response(204)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    monkeypatch.setattr(
        factory,
        "HttpAnalyticsSink",
        lambda base_url, timeout: HttpAnalyticsSink(base_url, timeout, client=client),
    )
    monkeypatch.setenv("FLASHREP_ANALYTICS_BACKEND", "http")
    monkeypatch.setenv("FLASHREP_ANALYTICS_URL", "http://analytics.test/analytics")

    result = runner.invoke(app, ["review", str(deck_file), "--limit", "1"], input="\n4\n")

    assert result.exit_code == 0, result.stdout
    assert paths == [
        "/analytics/sessions",
        "/analytics/sessions/remote-1/answers",
        "/analytics/sessions/remote-1/end",
    ]
    assert client.is_closed


def test_review_closes_http_analytics_client_when_nothing_due(tmp_path, mock_home, monkeypatch):
    from flashrep.application import factory

    path = tmp_path / "deck.yaml"
    path.write_text(yaml.safe_dump({"cards": [DECK["cards"][2]]}), encoding="utf-8")

    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
    monkeypatch.setattr(
        factory,
        "HttpAnalyticsSink",
        lambda base_url, timeout: HttpAnalyticsSink(base_url, timeout, client=client),
    )
    monkeypatch.setenv("FLASHREP_ANALYTICS_BACKEND", "http")

    result = runner.invoke(app, ["review", str(path)])

    assert result.exit_code == 0
    assert client.is_closed

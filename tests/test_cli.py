"""Tests for the command-line interface."""

import logging

import orjson
import pytest
from click.testing import CliRunner

from reading_tracker.cli import cli
from reading_tracker.config import Settings
from reading_tracker.rescore import load_sessions

STRONG_TITLE = "A tutorial on transformer architecture"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger onto the runner's streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestAnalyze:
    """The analyze command."""

    def test_json_from_stdin(self, runner, technical_article):
        result = runner.invoke(
            cli,
            ["analyze", "https://arxiv.org/abs/1234", "--title", STRONG_TITLE, "--json"],
            input=technical_article,
        )

        assert result.exit_code == 0
        data = orjson.loads(result.output)
        assert data["should_track"] is True
        assert data["learning_score"] == 91
        assert data["category"] == "technology"
        assert data["signals"]["platform_specific"]["platform"] == "generic"

    def test_table_from_file(self, runner, tmp_path, technical_article):
        page = tmp_path / "page.txt"
        page.write_text(technical_article, encoding="utf-8")

        result = runner.invoke(
            cli,
            ["analyze", "https://arxiv.org/abs/1234", "--title", STRONG_TITLE, "--file", str(page)],
        )

        assert result.exit_code == 0
        assert "Learning score: 91/100" in result.output
        assert "Category: technology" in result.output
        assert "Content quality" in result.output

    def test_min_score_override(self, runner, technical_article):
        result = runner.invoke(
            cli,
            ["analyze", "https://arxiv.org/abs/1234", "--title", STRONG_TITLE, "--json", "--min-score", "95"],
            input=technical_article,
        )

        data = orjson.loads(result.output)
        assert data["learning_score"] == 91
        assert data["should_track"] is False

    def test_gated_content(self, runner, short_article):
        result = runner.invoke(cli, ["analyze", "https://example.com/walk"], input=short_article)

        assert result.exit_code == 0
        assert "Learning score: 0/100" in result.output
        assert "Content too short" in result.output
        assert "Signals" not in result.output

    def test_min_score_out_of_range(self, runner):
        result = runner.invoke(cli, ["analyze", "https://example.com", "--min-score", "150"], input="")

        assert result.exit_code == 2


def test_admit(runner):
    result = runner.invoke(cli, ["admit", "https://www.linkedin.com/posts/abc", "--title", "Worth reading"])

    assert result.exit_code == 0
    data = orjson.loads(result.output)
    assert data["learning_score"] == 75
    assert data["category"] == "newsletter_queue"
    assert data["should_track"] is True


def test_rescore_to_output_file(runner, sessions_file, tmp_path):
    output = tmp_path / "rescored.jsonl"

    result = runner.invoke(cli, ["rescore", str(sessions_file), "-o", str(output)])

    assert result.exit_code == 0
    assert "Rescored 1 of 3 sessions, 1 above threshold" in result.output
    rescored = load_sessions(output)
    assert rescored[0]["learning_score"] == 91
    assert load_sessions(sessions_file)[0]["learning_score"] == 0


def test_rescore_in_place(runner, sessions_file):
    result = runner.invoke(cli, ["rescore", str(sessions_file)])

    assert result.exit_code == 0
    assert load_sessions(sessions_file)[0]["category"] == "technology"


def test_rescore_keeps_existing_scores_without_all(runner, sessions_file):
    runner.invoke(cli, ["rescore", str(sessions_file)])

    assert load_sessions(sessions_file)[1]["learning_score"] == 40


def test_rescore_all(runner, sessions_file):
    result = runner.invoke(cli, ["rescore", str(sessions_file), "--all"])

    assert result.exit_code == 0
    assert "Rescored 2 of 3 sessions, 1 above threshold" in result.output
    assert load_sessions(sessions_file)[1]["learning_score"] == 0


def test_rescore_malformed_file(runner, tmp_path):
    path = tmp_path / "broken.jsonl"
    path.write_text("not json\n", encoding="utf-8")

    result = runner.invoke(cli, ["rescore", str(path)])

    assert result.exit_code == 1
    assert "broken.jsonl:1" in result.output


def test_digest(runner, sessions_file):
    result = runner.invoke(cli, ["digest", str(sessions_file)])

    assert result.exit_code == 0
    assert "## Curated Articles" in result.output
    assert "- [75] Queued post <https://www.linkedin.com/posts/abc>" in result.output
    assert "A walk" not in result.output


def test_digest_after_rescore(runner, sessions_file):
    runner.invoke(cli, ["rescore", str(sessions_file)])

    result = runner.invoke(cli, ["digest", str(sessions_file), "--min-score", "60"])

    assert "## Technology & Development" in result.output
    assert f"- [91] {STRONG_TITLE} <https://arxiv.org/abs/1234>" in result.output


def test_digest_nothing_qualifies(runner, tmp_path):
    path = tmp_path / "sessions.jsonl"
    path.write_bytes(orjson.dumps({"url": "https://example.com", "title": "Meh", "learning_score": 40}) + b"\n")

    result = runner.invoke(cli, ["digest", str(path)])

    assert result.exit_code == 0
    assert "No sessions qualify for the digest." in result.output


def test_validate_config(runner):
    result = runner.invoke(cli, ["validate-config"])

    assert result.exit_code == 0
    assert "Configuration is valid" in result.output


def test_validate_config_failure(runner, monkeypatch):
    monkeypatch.setattr("reading_tracker.cli.get_settings", lambda: Settings(w_content_quality=0.9))

    result = runner.invoke(cli, ["validate-config"])

    assert result.exit_code == 1


def test_analyze_with_invalid_configuration(runner, monkeypatch):
    monkeypatch.setattr("reading_tracker.cli.get_settings", lambda: Settings(w_content_quality=0.9))

    result = runner.invoke(cli, ["analyze", "https://example.com"], input="text")

    assert result.exit_code == 1
    assert "Error" in result.output

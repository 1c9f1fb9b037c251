"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from textbayes.classifier import Classifier
from textbayes.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _invoke(runner: CliRunner, model: Path, *args: str, input: str | None = None):
    return runner.invoke(main, ["--model", str(model), *args], input=input)


class TestTrainAndQuery:
    def test_train_then_classify(self, runner: CliRunner, model_path: Path) -> None:
        assert _invoke(runner, model_path, "train", "spam", "free prize click now").exit_code == 0
        assert _invoke(runner, model_path, "train", "ham", "team meeting schedule").exit_code == 0

        result = _invoke(runner, model_path, "classify", "--output", "json", "free prize now")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["category"] == "spam"
        assert data["score"] == pytest.approx(3.0)

    def test_train_persists_model(self, runner: CliRunner, model_path: Path) -> None:
        _invoke(runner, model_path, "train", "spam", "buy now buy now")
        assert model_path.exists()

        classifier = Classifier()
        classifier.load_from_file(str(model_path))
        assert classifier.summaries()["spam"].token_tally == 4

    def test_train_reads_stdin(self, runner: CliRunner, model_path: Path) -> None:
        result = _invoke(runner, model_path, "train", "ham", input="hello world\n")
        assert result.exit_code == 0, result.output

        info = _invoke(runner, model_path, "info", "--output", "json")
        assert json.loads(info.output)["ham"]["token_tally"] == 2

    def test_train_renders_summary_table(self, runner: CliRunner, model_path: Path) -> None:
        result = _invoke(runner, model_path, "train", "spam", "buy now")
        assert result.exit_code == 0
        assert "spam" in result.output

    def test_score_json(self, runner: CliRunner, model_path: Path) -> None:
        _invoke(runner, model_path, "train", "a", "x x y")
        _invoke(runner, model_path, "train", "b", "x")

        result = _invoke(runner, model_path, "score", "--output", "json", "x")
        scores = json.loads(result.output)
        assert scores["a"] == pytest.approx(6 / 7)
        assert scores["b"] == pytest.approx(1 / 7)

    def test_score_rich_no_match(self, runner: CliRunner, model_path: Path) -> None:
        _invoke(runner, model_path, "train", "ham", "hello world")
        result = _invoke(runner, model_path, "score", "unseen tokens only")
        assert result.exit_code == 0
        assert "No category matched" in result.output

    def test_classify_without_model_file(self, runner: CliRunner, model_path: Path) -> None:
        result = _invoke(runner, model_path, "classify", "anything")
        assert result.exit_code == 0
        assert "No category matched" in result.output
        assert not model_path.exists()

    def test_untrain_removes_category(self, runner: CliRunner, model_path: Path) -> None:
        _invoke(runner, model_path, "train", "spam", "buy now")
        _invoke(runner, model_path, "untrain", "spam", "buy now")

        info = _invoke(runner, model_path, "info", "--output", "json")
        assert json.loads(info.output) == {}

    def test_flush(self, runner: CliRunner, model_path: Path) -> None:
        _invoke(runner, model_path, "train", "spam", "buy now")
        result = _invoke(runner, model_path, "flush")
        assert result.exit_code == 0
        assert "flushed" in result.output

        info = _invoke(runner, model_path, "info", "--output", "json")
        assert json.loads(info.output) == {}

    def test_stemming_option(self, runner: CliRunner, model_path: Path) -> None:
        runner.invoke(main, ["--model", str(model_path), "--stem", "train", "sport", "running"])
        result = runner.invoke(
            main, ["--model", str(model_path), "--stem", "score", "--output", "json", "runs"]
        )
        assert json.loads(result.output) == {"sport": pytest.approx(1.0)}

    def test_model_path_from_environment(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        target = tmp_path / "env.model"
        monkeypatch.setenv("TEXTBAYES_MODEL_PATH", str(target))
        result = runner.invoke(main, ["train", "spam", "buy"])
        assert result.exit_code == 0, result.output
        assert target.exists()


class TestErrors:
    def test_invalid_category(self, runner: CliRunner, model_path: Path) -> None:
        result = _invoke(runner, model_path, "train", "bad name", "text")
        assert result.exit_code == 1
        assert "invalid category name" in result.output
        assert not model_path.exists()

    def test_corrupt_model_file(self, runner: CliRunner, model_path: Path) -> None:
        model_path.write_bytes(b"not a model")
        result = _invoke(runner, model_path, "classify", "text")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_version_option(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output

"""Shared test fixtures for textbayes tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from textbayes.classifier import Classifier


@pytest.fixture
def classifier() -> Classifier:
    """An empty classifier using the default tokenizer."""
    return Classifier()


@pytest.fixture
def spam_ham_classifier() -> Classifier:
    """A classifier trained with one spam and one ham sample."""
    c = Classifier()
    c.train("spam", "free prize click now")
    c.train("ham", "team meeting schedule project")
    return c


@pytest.fixture
def model_path(tmp_path: Path) -> Path:
    """Absolute path for a snapshot file inside a temporary directory."""
    return tmp_path / "model.bin"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep configuration tests independent of the developer's environment."""
    for name in ("TEXTBAYES_MODEL_PATH", "TEXTBAYES_STEMMING"):
        # setenv first so values loaded from a .env during the test are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)

"""Environment-driven settings.

Values are read from the process environment after loading a ``.env`` file
from the working directory (variables already set in the environment take
precedence over the file):

- ``TEXTBAYES_MODEL_PATH`` — default snapshot location used when file
  persistence is given an empty path. Defaults to ``/tmp/textbayes.model``.
- ``TEXTBAYES_STEMMING`` — ``1``/``true``/``yes``/``on`` selects the
  stemming tokenizer for the command-line interface.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

DEFAULT_MODEL_PATH = "/tmp/textbayes.model"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _env_flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


@dataclass
class Settings:
    """Resolved runtime settings.

    Attributes:
        model_path: Default snapshot file location.
        stemming: Whether the CLI should use the stemming tokenizer.
    """

    model_path: str = DEFAULT_MODEL_PATH
    stemming: bool = False

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Build settings from the environment.

        Args:
            load_env_file: Load ``.env`` from the working directory first.
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        return cls(
            model_path=os.environ.get("TEXTBAYES_MODEL_PATH") or DEFAULT_MODEL_PATH,
            stemming=_env_flag(os.environ.get("TEXTBAYES_STEMMING")),
        )


def resolve_model_path(path: str) -> str:
    """Return *path*, or the configured default location if it is empty."""
    if path:
        return path
    return Settings.from_env().model_path

"""Exception hierarchy for textbayes.

Every failure raised by the engine derives from :class:`TextBayesError`.
Argument-style failures additionally derive from :class:`ValueError` so
callers that only care about "bad input" can catch the builtin.
"""

from __future__ import annotations

from typing import Optional


class TextBayesError(Exception):
    """Base class for all textbayes errors."""


# ---------------------------------------------------------------------------
# Training errors
# ---------------------------------------------------------------------------


class InvalidCategoryNameError(TextBayesError, ValueError):
    """A category name did not match ``^[-_A-Za-z0-9]+$``."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid category name: {name!r}")
        self.name = name


class InvalidCountError(TextBayesError, ValueError):
    """A token mutation was requested with a non-positive count."""

    def __init__(self, token: str, count: int) -> None:
        super().__init__(f"count must be positive for token {token!r}, got {count}")
        self.token = token
        self.count = count


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


class PersistenceError(TextBayesError):
    """Base class for snapshot save/load failures."""


class NilSinkError(PersistenceError, ValueError):
    """``save`` was called without a writable sink."""

    def __init__(self) -> None:
        super().__init__("sink is None")


class NilSourceError(PersistenceError, ValueError):
    """``load`` was called without a readable source."""

    def __init__(self) -> None:
        super().__init__("source is None")


class EncodeError(PersistenceError):
    """The snapshot could not be serialized or written to the sink."""


class DecodeError(PersistenceError):
    """The source did not contain a decodable snapshot."""


class PathNotAbsoluteError(PersistenceError, ValueError):
    """File persistence was given a relative path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"path must be absolute: {path!r}")
        self.path = path


class ModelFileError(PersistenceError):
    """A filesystem step of file-based persistence failed.

    Attributes:
        stage: The failing step (``create``, ``write``, ``sync``, ``close``,
            ``rename`` or ``open``).
        path: The file the step operated on.
    """

    def __init__(self, stage: str, path: str, reason: Optional[BaseException] = None) -> None:
        message = f"{stage} model file {path!r}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.stage = stage
        self.path = path


class ValidationError(PersistenceError, ValueError):
    """A decoded snapshot violated a model invariant; nothing was applied."""


class UnsupportedVersionError(ValidationError):
    """The snapshot's version tag is not the one this release writes."""

    def __init__(self, version: object, expected: int) -> None:
        super().__init__(f"unsupported model version: {version!r} (expected {expected})")
        self.version = version


class InvalidSnapshotCategoryError(ValidationError):
    """A snapshot category name is malformed or its entry has the wrong shape."""


class InvalidTokenCountError(ValidationError):
    """A snapshot token is empty or carries a non-positive count."""


class InvalidTallyError(ValidationError):
    """A snapshot tally is negative or disagrees with its token counts."""

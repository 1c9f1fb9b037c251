"""Category-name rule and snapshot invariant checks.

The name pattern is shared by live training and snapshot loading so that a
category accepted by one is always accepted by the other.
"""

from __future__ import annotations

import re

from .errors import (
    DecodeError,
    InvalidCategoryNameError,
    InvalidSnapshotCategoryError,
    InvalidTallyError,
    InvalidTokenCountError,
    UnsupportedVersionError,
    ValidationError,
)
from .models import ModelState, PersistedCategory

MODEL_VERSION = 1

CATEGORY_NAME_PATTERN = re.compile(r"^[-_A-Za-z0-9]+$")


def is_valid_category_name(name: object) -> bool:
    """Return True if *name* is a string matching the category pattern."""
    # fullmatch so a trailing newline is not accepted by ``$``
    return isinstance(name, str) and CATEGORY_NAME_PATTERN.fullmatch(name) is not None


def validate_category_name(name: object) -> str:
    """Return *name* unchanged if valid.

    Raises:
        InvalidCategoryNameError: If *name* does not match the pattern.
    """
    if not is_valid_category_name(name):
        raise InvalidCategoryNameError(str(name))
    return name  # type: ignore[return-value]


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_state(state: ModelState) -> None:
    """Check every snapshot invariant, raising on the first violation.

    A valid snapshot carries the current version, category names matching
    the live-training pattern, non-empty string tokens with strictly
    positive integer counts, and for each category a non-negative tally
    equal to the sum of its token counts.

    Raises:
        UnsupportedVersionError: If the version tag differs from
            :data:`MODEL_VERSION`.
        InvalidSnapshotCategoryError: If a category name is malformed.
        InvalidTokenCountError: If a token is empty or its count is not a
            positive integer.
        InvalidTallyError: If a tally is negative, not an integer, or does
            not match its token counts.
    """
    if not _is_int(state.version) or state.version != MODEL_VERSION:
        raise UnsupportedVersionError(state.version, MODEL_VERSION)

    if not isinstance(state.categories, dict):
        raise ValidationError("snapshot categories must be a mapping")

    for name, cat in state.categories.items():
        if not is_valid_category_name(name):
            raise InvalidSnapshotCategoryError(f"invalid category name in snapshot: {name!r}")
        if not isinstance(cat, PersistedCategory) or not isinstance(cat.tokens, dict):
            raise InvalidSnapshotCategoryError(f"malformed category entry for {name!r}")

        if not _is_int(cat.tally) or cat.tally < 0:
            raise InvalidTallyError(f"invalid tally for {name!r}: {cat.tally!r}")

        total = 0
        for token, count in cat.tokens.items():
            if not isinstance(token, str) or token == "":
                raise InvalidTokenCountError(f"invalid token for {name!r}: {token!r}")
            if not _is_int(count) or count <= 0:
                raise InvalidTokenCountError(
                    f"invalid token count for {name!r} token {token!r}: {count!r}"
                )
            total += count

        if total != cat.tally:
            raise InvalidTallyError(
                f"tally mismatch for {name!r}: tally={cat.tally} sum={total}"
            )


def _require_mapping(value: object, what: str) -> dict:
    if not isinstance(value, dict):
        raise DecodeError(f"decode model: {what} must be a mapping, got {type(value).__name__}")
    return value


def state_from_dict(data: object) -> ModelState:
    """Build a :class:`ModelState` from a decoded payload.

    Only the container shape is checked here; call :func:`validate_state`
    for the invariants. Every field of the snapshot layout is required.

    Raises:
        DecodeError: If the payload is not shaped like a snapshot.
    """
    data = _require_mapping(data, "snapshot")
    for key in ("version", "categories"):
        if key not in data:
            raise DecodeError(f"decode model: snapshot has no {key!r} field")

    categories: dict[str, PersistedCategory] = {}
    for name, entry in _require_mapping(data["categories"], "snapshot categories").items():
        entry = _require_mapping(entry, f"category entry {name!r}")
        for key in ("tokens", "tally"):
            if key not in entry:
                raise DecodeError(f"decode model: category entry {name!r} has no {key!r} field")
        categories[name] = PersistedCategory(
            tokens=dict(_require_mapping(entry["tokens"], f"tokens of {name!r}")),
            tally=entry["tally"],
        )

    return ModelState(version=data["version"], categories=categories)

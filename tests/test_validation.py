"""Tests for the category-name rule and snapshot invariant checks."""

from __future__ import annotations

import pytest

from textbayes.errors import (
    DecodeError,
    InvalidCategoryNameError,
    InvalidSnapshotCategoryError,
    InvalidTallyError,
    InvalidTokenCountError,
    UnsupportedVersionError,
    ValidationError,
)
from textbayes.models import ModelState, PersistedCategory
from textbayes.validation import (
    MODEL_VERSION,
    is_valid_category_name,
    state_from_dict,
    validate_category_name,
    validate_state,
)


class TestCategoryNames:
    @pytest.mark.parametrize("name", ["spam", "HAM", "a-b_c", "123", "_"])
    def test_valid(self, name: str) -> None:
        assert is_valid_category_name(name)
        assert validate_category_name(name) == name

    @pytest.mark.parametrize("name", ["", " ", "a b", "a.b", "tab\t", "end\n", "naïve", None, 5])
    def test_invalid(self, name: object) -> None:
        assert not is_valid_category_name(name)
        with pytest.raises(InvalidCategoryNameError):
            validate_category_name(name)


class TestValidateState:
    def _state(self, **categories: PersistedCategory) -> ModelState:
        return ModelState(version=MODEL_VERSION, categories=dict(categories))

    def test_valid_state(self) -> None:
        validate_state(self._state(spam=PersistedCategory({"buy": 2, "now": 1}, 3)))

    def test_empty_state(self) -> None:
        validate_state(self._state())

    def test_bool_version_rejected(self) -> None:
        with pytest.raises(UnsupportedVersionError):
            validate_state(ModelState(version=True))  # type: ignore[arg-type]

    def test_non_int_count_rejected(self) -> None:
        with pytest.raises(InvalidTokenCountError):
            validate_state(self._state(spam=PersistedCategory({"buy": 1.5}, 1)))  # type: ignore[dict-item]

    def test_non_str_token_rejected(self) -> None:
        with pytest.raises(InvalidTokenCountError):
            validate_state(self._state(spam=PersistedCategory({7: 1}, 1)))  # type: ignore[dict-item]

    def test_non_int_tally_rejected(self) -> None:
        with pytest.raises(InvalidTallyError):
            validate_state(self._state(spam=PersistedCategory({"buy": 1}, "1")))  # type: ignore[arg-type]

    def test_wrong_entry_type_rejected(self) -> None:
        state = ModelState(version=MODEL_VERSION, categories={"spam": {"tokens": {}, "tally": 0}})  # type: ignore[dict-item]
        with pytest.raises(InvalidSnapshotCategoryError):
            validate_state(state)

    def test_error_message_names_category(self) -> None:
        with pytest.raises(InvalidTallyError, match="spam"):
            validate_state(self._state(spam=PersistedCategory({"buy": 1}, 2)))


class TestStateFromDict:
    def test_builds_model_state(self) -> None:
        state = state_from_dict({
            "version": 1,
            "categories": {"spam": {"tokens": {"buy": 1}, "tally": 1}},
        })
        assert state == ModelState(1, {"spam": PersistedCategory({"buy": 1}, 1)})

    @pytest.mark.parametrize("payload", [
        None,
        "x",
        [],
        {"categories": {}},
        {"version": 1},
        {"version": 1, "categories": []},
        {"version": 1, "categories": {"spam": "x"}},
        {"version": 1, "categories": {"spam": {"tally": 0}}},
        {"version": 1, "categories": {"spam": {"tokens": {}}}},
    ])
    def test_rejects_bad_shapes(self, payload: object) -> None:
        with pytest.raises(DecodeError):
            state_from_dict(payload)

    def test_shape_errors_are_not_validation_errors(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            state_from_dict({"version": 1})
        assert not isinstance(exc_info.value, ValidationError)

    def test_rejects_non_mapping_tokens(self) -> None:
        with pytest.raises(DecodeError):
            state_from_dict({"version": 1, "categories": {"spam": {"tokens": [], "tally": 0}}})

"""Collection of trained categories and their cached prior probabilities."""

from __future__ import annotations

import threading

from .models import Category, CategorySummary, ModelState, PersistedCategory
from .validation import MODEL_VERSION, validate_state


class CategoryStore:
    """Owns every :class:`Category` of a classifier, keyed by name.

    Priors are cached on each category and recomputed lazily: any mutation
    marks the store dirty, and :meth:`ensure_probabilities` refreshes all
    priors in one pass before they are next read.

    The store itself is not thread-safe for mutation; the classifier's
    reader-writer lock serializes writers. Recomputation is guarded by an
    internal mutex because it runs from concurrent readers.
    """

    def __init__(self) -> None:
        self._categories: dict[str, Category] = {}
        self._probabilities_dirty = True
        self._recompute_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name: object) -> bool:
        return name in self._categories

    @property
    def probabilities_dirty(self) -> bool:
        return self._probabilities_dirty

    def add(self, name: str) -> Category:
        """Create an empty category, replacing any existing one of that name."""
        cat = Category(name)
        self._categories[name] = cat
        self._probabilities_dirty = True
        return cat

    def get_or_create(self, name: str) -> Category:
        """Return the named category, creating an empty one if needed."""
        cat = self._categories.get(name)
        if cat is None:
            cat = self.add(name)
        return cat

    def lookup(self, name: str) -> tuple[Category | None, bool]:
        """Return ``(category, found)`` without creating anything."""
        cat = self._categories.get(name)
        return cat, cat is not None

    def delete(self, name: str) -> None:
        """Remove the named category. Missing names are ignored."""
        if self._categories.pop(name, None) is not None:
            self._probabilities_dirty = True

    def names(self) -> list[str]:
        """Return all category names in no particular order."""
        return list(self._categories)

    def mark_dirty(self) -> None:
        self._probabilities_dirty = True

    def ensure_probabilities(self) -> None:
        """Recompute every category's priors if the cache is stale.

        ``prob_in_cat`` is the category's share of the total tally across all
        categories (0.0 when nothing is trained); ``prob_not_in_cat`` is its
        complement.
        """
        if not self._probabilities_dirty:
            return

        with self._recompute_lock:
            if not self._probabilities_dirty:
                return

            total = sum(cat.tally for cat in self._categories.values())
            for cat in self._categories.values():
                prob_in_cat = cat.tally / total if total > 0 else 0.0
                cat._set_probabilities(prob_in_cat, 1.0 - prob_in_cat)

            self._probabilities_dirty = False

    def summaries(self) -> dict[str, CategorySummary]:
        """Return an independent copy of each category's tally and priors."""
        return {
            name: CategorySummary(
                token_tally=cat.tally,
                prob_in_cat=cat.prob_in_cat,
                prob_not_in_cat=cat.prob_not_in_cat,
            )
            for name, cat in self._categories.items()
        }

    def export_state(self) -> ModelState:
        """Deep-copy every category's token table into a versioned snapshot."""
        return ModelState(
            version=MODEL_VERSION,
            categories={
                name: PersistedCategory(tokens=cat.tokens(), tally=cat.tally)
                for name, cat in self._categories.items()
            },
        )

    def replace_state(self, state: ModelState) -> None:
        """Discard all categories and rebuild them from *state*.

        The snapshot is validated in full before anything is touched, so a
        rejected snapshot leaves the store exactly as it was.

        Raises:
            ValidationError: If *state* violates a snapshot invariant.
        """
        validate_state(state)

        categories: dict[str, Category] = {}
        for name, persisted in state.categories.items():
            cat = Category(name)
            cat._restore(persisted.tokens, persisted.tally)
            categories[name] = cat

        self._categories = categories
        self._probabilities_dirty = True

"""Thread-safe, memory-resident Bayesian text classifier.

Text is tokenized, token occurrences are counted per sample, and the counts
are accumulated into named categories. Scoring combines, per token, the
ratio of a category's count to the token's total count across categories
with that category's prior probability (its share of all trained tokens).

The resulting scores are a relative ranking signal rather than calibrated
probabilities: a sample scores higher against a category the more of its
tokens were seen mostly in that category, weighted by how often each token
occurs in the sample.

Example::

    classifier = Classifier()
    classifier.train("spam", "free prize click now")
    classifier.train("ham", "team meeting schedule project")

    result = classifier.classify("free prize now")
    print(result.category)  # "spam"

    classifier.save_to_file("/var/lib/textbayes/model.bin")
"""

from __future__ import annotations

from collections import Counter
from typing import BinaryIO, Optional

from . import persistence
from .categories import CategoryStore
from .errors import InvalidCountError
from .locking import ReadWriteLock
from .models import Category, CategorySummary, Classification, ModelState
from .tokenizer import Tokenizer, tokenize
from .validation import validate_category_name


def count_occurrences(tokens: list[str]) -> Counter[str]:
    """Count how often each distinct token appears in *tokens*."""
    return Counter(tokens)


def bayesian_probability(category: Category, token_score: float, token_tally: float) -> float:
    """Contribution of one token occurrence to *category*'s score.

    Args:
        category: Category with current priors.
        token_score: The category's trained count for the token.
        token_tally: The token's trained count summed over all categories.
            Must be positive.

    Returns:
        ``P(tok|cat) * P(cat) / (P(tok|cat) * P(cat) + P(tok|!cat) * P(!cat))``
        where the token ratios are taken from the raw counts, or 0.0 when
        the denominator vanishes.
    """
    prob_token_in_cat = token_score / token_tally
    prob_token_not_in_cat = (token_tally - token_score) / token_tally

    numerator = prob_token_in_cat * category.prob_in_cat
    denominator = numerator + prob_token_not_in_cat * category.prob_not_in_cat

    if denominator != 0.0:
        return numerator / denominator
    return 0.0


class Classifier:
    """Trains text categories and classifies new samples against them.

    All state lives in a single :class:`CategoryStore` guarded by a
    reader-writer lock: ``train``, ``untrain``, ``flush`` and ``load`` take
    it exclusively, while ``classify``, ``score``, ``summaries`` and
    ``save`` share it. One instance is meant to be shared by every caller
    in a process.

    Args:
        tokenizer: Callable turning text into a list of tokens. Defaults to
            :func:`textbayes.tokenizer.tokenize`.
    """

    def __init__(self, tokenizer: Optional[Tokenizer] = None) -> None:
        self._store = CategoryStore()
        self._lock = ReadWriteLock()
        self._tokenizer: Optional[Tokenizer] = tokenizer

    @property
    def tokenizer(self) -> Tokenizer:
        """The active tokenizer. Assign ``None`` to restore the default."""
        return self._tokenizer or tokenize

    @tokenizer.setter
    def tokenizer(self, value: Optional[Tokenizer]) -> None:
        self._tokenizer = value

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self, category: str, text: str) -> None:
        """Add the token counts of *text* to *category*.

        The category is created on first use.

        Raises:
            InvalidCategoryNameError: If *category* is not a valid name.
                Nothing is modified in that case.
        """
        validate_category_name(category)
        occurrences = count_occurrences(self.tokenizer(text))

        with self._lock.write_locked():
            cat = self._store.get_or_create(category)
            for token, count in occurrences.items():
                try:
                    cat.train_token(token, count)
                except InvalidCountError:
                    continue
            self._clean_up(cat)
            self._store.mark_dirty()

    def untrain(self, category: str, text: str) -> None:
        """Remove the token counts of *text* from *category*.

        A category whose tally reaches zero is deleted.

        Raises:
            InvalidCategoryNameError: If *category* is not a valid name.
                Nothing is modified in that case.
        """
        validate_category_name(category)
        occurrences = count_occurrences(self.tokenizer(text))

        with self._lock.write_locked():
            cat = self._store.get_or_create(category)
            for token, count in occurrences.items():
                try:
                    cat.untrain_token(token, count)
                except InvalidCountError:
                    continue
            self._clean_up(cat)
            self._store.mark_dirty()

    def _clean_up(self, cat: Category) -> None:
        if cat.tally == 0:
            self._store.delete(cat.name)

    def flush(self) -> None:
        """Discard every trained category."""
        with self._lock.write_locked():
            self._store = CategoryStore()

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, text: str) -> Classification:
        """Return the highest-scoring category for *text*.

        Ties go to the lexicographically smallest category name. If no
        category scores above zero the result is empty.
        """
        scores = self.score(text)

        result = Classification()
        for name in sorted(scores):
            if scores[name] > result.score:
                result = Classification(category=name, score=scores[name])
        return result

    def score(self, text: str) -> dict[str, float]:
        """Score *text* against every category.

        Returns:
            Mapping of category name to score, containing only categories
            whose score is strictly positive.
        """
        occurrences = count_occurrences(self.tokenizer(text))

        with self._lock.read_locked():
            return self._score_unlocked(occurrences)

    def _score_unlocked(self, occurrences: Counter[str]) -> dict[str, float]:
        self._store.ensure_probabilities()

        categories: dict[str, Category] = {}
        for name in self._store.names():
            cat, _ = self._store.lookup(name)
            categories[name] = cat  # type: ignore[assignment]
        scores = {name: 0.0 for name in categories}

        for token, count in occurrences.items():
            token_scores = {
                name: float(cat.token_count(token)) for name, cat in categories.items()
            }
            token_tally = sum(token_scores.values())

            # Never seen in training
            if token_tally == 0.0:
                continue

            for name, token_score in token_scores.items():
                probability = bayesian_probability(categories[name], token_score, token_tally)
                scores[name] += count * probability

        return {name: score for name, score in scores.items() if score > 0.0}

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def summaries(self) -> dict[str, CategorySummary]:
        """Return a copy of each category's tally and current priors."""
        with self._lock.read_locked():
            self._store.ensure_probabilities()
            return self._store.summaries()

    def categories(self) -> list[str]:
        """Return the sorted names of all trained categories."""
        with self._lock.read_locked():
            return sorted(self._store.names())

    # ------------------------------------------------------------------
    # Snapshots and persistence
    # ------------------------------------------------------------------

    def export_state(self) -> ModelState:
        """Take a deep, independent snapshot of every category."""
        with self._lock.read_locked():
            return self._store.export_state()

    def replace_state(self, state: ModelState) -> None:
        """Replace all categories with those in *state*.

        The snapshot is validated before the lock is taken; on failure the
        current categories are left untouched.

        Raises:
            ValidationError: If *state* violates a snapshot invariant.
        """
        store = CategoryStore()
        store.replace_state(state)

        with self._lock.write_locked():
            self._store = store

    def save(self, sink: Optional[BinaryIO]) -> None:
        """Write a snapshot of the model to a binary stream."""
        persistence.save(self, sink)

    def load(self, source: Optional[BinaryIO]) -> None:
        """Replace the model with a snapshot read from a binary stream."""
        persistence.load(self, source)

    def save_to_file(self, path: str = "") -> None:
        """Atomically write a snapshot to *path* (or the default location)."""
        persistence.save_to_file(self, path)

    def load_from_file(self, path: str = "") -> None:
        """Replace the model with the snapshot stored at *path*."""
        persistence.load_from_file(self, path)

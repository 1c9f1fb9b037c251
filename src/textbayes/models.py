"""Data models for the Bayesian text classifier."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import InvalidCountError


class Category:
    """Token-count table for a single trained category.

    The tally is kept equal to the sum of all token counts at all times and
    a token whose count would drop to zero is removed rather than stored.
    The cached priors are written only by the owning
    :class:`~textbayes.categories.CategoryStore`.

    Args:
        name: Category identifier. Validated by the caller, not here.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._tokens: dict[str, int] = {}
        self._tally = 0
        self._prob_in_cat = 0.0
        self._prob_not_in_cat = 0.0

    def __repr__(self) -> str:
        return f"Category(name={self._name!r}, tally={self._tally}, tokens={len(self._tokens)})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def tally(self) -> int:
        """Total count of all tokens trained into this category."""
        return self._tally

    @property
    def prob_in_cat(self) -> float:
        """Share of all trained tokens that belong to this category."""
        return self._prob_in_cat

    @property
    def prob_not_in_cat(self) -> float:
        return self._prob_not_in_cat

    def token_count(self, token: str) -> int:
        """Return the trained count for *token*, or 0 if it is unknown."""
        return self._tokens.get(token, 0)

    def tokens(self) -> dict[str, int]:
        """Return a copy of the token-count table."""
        return dict(self._tokens)

    def train_token(self, token: str, count: int) -> None:
        """Add *count* occurrences of *token*.

        Raises:
            InvalidCountError: If *count* is not positive.
        """
        if count <= 0:
            raise InvalidCountError(token, count)
        self._tokens[token] = self._tokens.get(token, 0) + count
        self._tally += count

    def untrain_token(self, token: str, count: int) -> None:
        """Remove up to *count* occurrences of *token*.

        Unknown tokens are ignored. Removing at least as many occurrences as
        are stored drops the token entirely.

        Raises:
            InvalidCountError: If *count* is not positive.
        """
        if count <= 0:
            raise InvalidCountError(token, count)

        current = self._tokens.get(token)
        if current is None:
            return

        if count >= current:
            del self._tokens[token]
            self._tally -= current
        else:
            self._tokens[token] = current - count
            self._tally -= count

    def _set_probabilities(self, prob_in_cat: float, prob_not_in_cat: float) -> None:
        self._prob_in_cat = prob_in_cat
        self._prob_not_in_cat = prob_not_in_cat

    def _restore(self, tokens: dict[str, int], tally: int) -> None:
        # Snapshot input is validated before it reaches here.
        self._tokens = dict(tokens)
        self._tally = tally


@dataclass
class CategorySummary:
    """Point-in-time view of one category's tally and priors.

    Attributes:
        token_tally: Total tokens trained into the category.
        prob_in_cat: Prior probability that a token belongs to the category.
        prob_not_in_cat: Complement of ``prob_in_cat``.
    """

    token_tally: int = 0
    prob_in_cat: float = 0.0
    prob_not_in_cat: float = 0.0

    def to_dict(self) -> dict:
        return {
            "token_tally": self.token_tally,
            "prob_in_cat": self.prob_in_cat,
            "prob_not_in_cat": self.prob_not_in_cat,
        }


@dataclass
class PersistedCategory:
    """Serializable token table of a single category."""

    tokens: dict[str, int] = field(default_factory=dict)
    tally: int = 0

    def to_dict(self) -> dict:
        return {"tokens": dict(self.tokens), "tally": self.tally}


@dataclass
class ModelState:
    """Versioned snapshot of every category in a classifier."""

    version: int
    categories: dict[str, PersistedCategory] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "categories": {
                name: cat.to_dict() for name, cat in self.categories.items()
            },
        }


@dataclass
class Classification:
    """Best-matching category for a text sample.

    An empty ``category`` with a zero ``score`` means no category scored
    above zero.
    """

    category: str = ""
    score: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.category

    def to_dict(self) -> dict:
        return {"category": self.category, "score": self.score}

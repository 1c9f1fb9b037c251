"""Text tokenization strategies for the classifier.

A tokenizer is any callable taking a string and returning a list of token
strings. Two strategies ship with the package:

- :func:`tokenize` — the default: Unicode NFKC normalisation, lowercasing,
  and splitting on every character that is neither a letter nor a digit.
- :class:`StemmingTokenizer` — the default pipeline followed by Snowball
  stemming, so that "running" and "runs" both count as "run".
"""

from __future__ import annotations

import re
import unicodedata
from typing import Callable

from nltk.stem.snowball import SnowballStemmer

Tokenizer = Callable[[str], list[str]]

# Any run of characters that are not letters or digits. ``\W`` also keeps the
# underscore, so it is excluded explicitly.
_SEPARATOR_RE = re.compile(r"[\W_]+")


def normalize(text: str) -> str:
    """Apply NFKC normalisation and lowercase *text*."""
    return unicodedata.normalize("NFKC", text).lower()


def tokenize(text: str) -> list[str]:
    """Split *text* into lowercase alphanumeric tokens, preserving order.

    Example::

        >>> tokenize("Buy NOW, buy-now!")
        ['buy', 'now', 'buy', 'now']
    """
    return [token for token in _SEPARATOR_RE.split(normalize(text)) if token]


class StemmingTokenizer:
    """Default tokenization followed by Snowball stemming.

    Args:
        language: Any language supported by NLTK's ``SnowballStemmer``.
    """

    def __init__(self, language: str = "english") -> None:
        self.language = language
        self._stemmer = SnowballStemmer(language, ignore_stopwords=False)

    def __repr__(self) -> str:
        return f"StemmingTokenizer(language={self.language!r})"

    def __call__(self, text: str) -> list[str]:
        tokens = []
        for token in tokenize(text):
            stemmed = self._stemmer.stem(token)
            tokens.append(stemmed or token)
        return tokens

"""textbayes -- memory-resident Naive Bayes text classification."""

__version__ = "1.0.0"

from .categories import CategoryStore
from .classifier import Classifier, bayesian_probability, count_occurrences
from .config import Settings, resolve_model_path
from .errors import (
    DecodeError,
    EncodeError,
    InvalidCategoryNameError,
    InvalidCountError,
    InvalidSnapshotCategoryError,
    InvalidTallyError,
    InvalidTokenCountError,
    ModelFileError,
    NilSinkError,
    NilSourceError,
    PathNotAbsoluteError,
    PersistenceError,
    TextBayesError,
    UnsupportedVersionError,
    ValidationError,
)
from .locking import ReadWriteLock
from .models import (
    Category,
    CategorySummary,
    Classification,
    ModelState,
    PersistedCategory,
)
from .persistence import decode_state, encode_state
from .tokenizer import StemmingTokenizer, tokenize
from .validation import (
    CATEGORY_NAME_PATTERN,
    MODEL_VERSION,
    is_valid_category_name,
    validate_category_name,
    validate_state,
)

__all__ = [
    # Engine
    "Classifier",
    "CategoryStore",
    "Category",
    "bayesian_probability",
    "count_occurrences",
    # Results and snapshots
    "Classification",
    "CategorySummary",
    "ModelState",
    "PersistedCategory",
    "encode_state",
    "decode_state",
    # Tokenization
    "tokenize",
    "StemmingTokenizer",
    # Validation
    "CATEGORY_NAME_PATTERN",
    "MODEL_VERSION",
    "is_valid_category_name",
    "validate_category_name",
    "validate_state",
    # Configuration and concurrency
    "Settings",
    "resolve_model_path",
    "ReadWriteLock",
    # Errors
    "TextBayesError",
    "InvalidCategoryNameError",
    "InvalidCountError",
    "PersistenceError",
    "NilSinkError",
    "NilSourceError",
    "EncodeError",
    "DecodeError",
    "PathNotAbsoluteError",
    "ModelFileError",
    "ValidationError",
    "UnsupportedVersionError",
    "InvalidSnapshotCategoryError",
    "InvalidTokenCountError",
    "InvalidTallyError",
]

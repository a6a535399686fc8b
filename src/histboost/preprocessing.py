"""Turn tabular records into numeric feature and target matrices.

Categorical columns become integer codes in first-seen order, free text
becomes hashed bag-of-words counts and target columns become class codes
that the booster regresses on. Unknown values map to -1.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import numpy as np

from histboost.utils.metrics import clamp_class_index

logger = logging.getLogger(__name__)

DEFAULT_TEXT_BUCKETS: int = 100
UNSEEN_CODE: int = -1

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def hash_word(word: str) -> int:
    """32-bit FNV-1a hash of a word's UTF-8 bytes."""
    h = _FNV32_OFFSET
    for byte in word.encode("utf-8"):
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def hash_bag_of_words(text: str, n_buckets: int) -> np.ndarray:
    """Count lowercased whitespace tokens into ``n_buckets`` hash buckets.

    Args:
        text: Free text.
        n_buckets: Number of output buckets.

    Returns:
        Float64 token counts of shape (n_buckets,).
    """
    buckets = np.zeros(n_buckets, dtype=np.float64)
    for word in text.lower().split():
        buckets[hash_word(word) % n_buckets] += 1.0
    return buckets


def _normalize(value: Any) -> str:
    return str(value).strip().lower()


class CategoryEncoder:
    """Map category strings to integer codes.

    Values are stripped and lowercased before lookup. Codes follow the
    order in which values were first seen during :meth:`fit`.

    Attributes:
        classes_: Normalized category values, indexed by code.
    """

    def __init__(self) -> None:
        self.classes_: list[str] = []
        self._codes: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self.classes_)

    def fit(self, values: Iterable[Any]) -> "CategoryEncoder":
        """Register every unseen value with the next free code."""
        for value in values:
            key = _normalize(value)
            if key not in self._codes:
                self._codes[key] = len(self.classes_)
                self.classes_.append(key)
        return self

    def encode(self, value: Any) -> int:
        """Code for a single value, -1 if it was never seen."""
        return self._codes.get(_normalize(value), UNSEEN_CODE)

    def transform(self, values: Iterable[Any]) -> np.ndarray:
        """Codes for many values as a float64 array."""
        return np.array([self.encode(value) for value in values], dtype=np.float64)

    def decode(self, code: int) -> str:
        """Label for a code.

        Raises:
            IndexError: If the code is outside ``[0, len(classes_) - 1]``.
        """
        if code < 0 or code >= len(self.classes_):
            raise IndexError(f"Code {code} out of range for {len(self.classes_)} classes")
        return self.classes_[code]


class TabularPreprocessor:
    """Encode records into the (X, Y) matrices consumed by the booster.

    Feature columns are laid out as
    ``[categorical..., numeric..., text buckets...]`` where every text
    column contributes ``n_text_buckets`` counts.

    Args:
        categorical: Names of categorical feature columns.
        numeric: Names of numeric feature columns.
        text: Names of free-text columns to hash.
        targets: Names of target columns.
        n_text_buckets: Hash buckets per text column. Default is 100.

    Attributes:
        feature_encoders_: One encoder per categorical column.
        target_encoders_: One encoder per target column.

    Example:
        >>> pre = TabularPreprocessor(categorical=["county"], numeric=["years"],
        ...                           text=["prompt"], targets=["diagnosis"])
        >>> X, Y = pre.fit(records).transform(records)
    """

    def __init__(
        self,
        categorical: Sequence[str] = (),
        numeric: Sequence[str] = (),
        text: Sequence[str] = (),
        targets: Sequence[str] = (),
        n_text_buckets: int = DEFAULT_TEXT_BUCKETS,
    ) -> None:
        self.categorical = list(categorical)
        self.numeric = list(numeric)
        self.text = list(text)
        self.targets = list(targets)
        self.n_text_buckets = n_text_buckets

        self.feature_encoders_: dict[str, CategoryEncoder] = {}
        self.target_encoders_: dict[str, CategoryEncoder] = {}

    @property
    def n_features(self) -> int:
        """Width of the feature matrix produced by :meth:`transform`."""
        return (
            len(self.categorical)
            + len(self.numeric)
            + len(self.text) * self.n_text_buckets
        )

    @property
    def class_counts(self) -> list[int]:
        """Number of known classes per target column."""
        return [len(self.target_encoders_[name]) for name in self.targets]

    def fit(self, records: Sequence[Mapping[str, Any]]) -> "TabularPreprocessor":
        """Build the categorical and target encoders.

        Args:
            records: Rows as mappings from column name to raw value.

        Returns:
            Self for method chaining.
        """
        self.feature_encoders_ = {
            name: CategoryEncoder().fit(record[name] for record in records)
            for name in self.categorical
        }
        self.target_encoders_ = {
            name: CategoryEncoder().fit(record[name] for record in records)
            for name in self.targets
        }
        logger.debug(
            "Fitted encoders on %d records: %s",
            len(records),
            {name: len(enc) for name, enc in self.target_encoders_.items()},
        )
        return self

    def transform(
        self, records: Sequence[Mapping[str, Any]]
    ) -> tuple[np.ndarray, np.ndarray]:
        """Encode records.

        Target columns missing from a record are encoded as -1, so unlabeled
        rows can be transformed with the same call.

        Args:
            records: Rows as mappings from column name to raw value.

        Returns:
            X: Features of shape (n_records, n_features).
            Y: Target codes of shape (n_records, n_targets).

        Raises:
            ValueError: If called before :meth:`fit`.
        """
        if len(self.target_encoders_) != len(self.targets) or len(
            self.feature_encoders_
        ) != len(self.categorical):
            raise ValueError("Preprocessor not fitted. Call fit() first.")

        n_records = len(records)
        X = np.zeros((n_records, self.n_features), dtype=np.float64)
        Y = np.full((n_records, len(self.targets)), UNSEEN_CODE, dtype=np.float64)

        for i, record in enumerate(records):
            col = 0
            for name in self.categorical:
                X[i, col] = self.feature_encoders_[name].encode(record[name])
                col += 1
            for name in self.numeric:
                X[i, col] = float(record[name])
                col += 1
            for name in self.text:
                end = col + self.n_text_buckets
                X[i, col:end] = hash_bag_of_words(str(record[name]), self.n_text_buckets)
                col = end

            for j, name in enumerate(self.targets):
                if name in record:
                    Y[i, j] = self.target_encoders_[name].encode(record[name])

        return X, Y

    def decode_predictions(self, predictions: Sequence[float]) -> list[str]:
        """Map one row of raw booster output back to target labels.

        Args:
            predictions: Raw scores, one per target.

        Returns:
            Label per target after rounding and clamping to a known class.

        Raises:
            ValueError: If a target column has no known classes.
        """
        labels = []
        for name, value in zip(self.targets, predictions):
            encoder = self.target_encoders_[name]
            if len(encoder) == 0:
                raise ValueError(f"Target '{name}' has no known classes to decode into.")
            labels.append(encoder.decode(clamp_class_index(float(value), len(encoder))))
        return labels

# face_attendance/embedding.py
import math
import numbers

import numpy as np

from face_attendance.errors import InvalidInputError

EMBEDDING_DIM = 128


def validate_embedding(raw, dim: int = EMBEDDING_DIM) -> np.ndarray:
    """
    Checks that `raw` is a sequence of exactly `dim` finite numbers and returns
    it as a float64 vector. No normalization is applied: the matcher compares
    vectors exactly as the extractor produced them.

    Raises InvalidInputError on anything else.
    """
    if raw is None:
        raise InvalidInputError("Embedding is missing.")
    if isinstance(raw, (str, bytes, dict)) or not hasattr(raw, '__len__'):
        raise InvalidInputError(f"Embedding must be a sequence of numbers, got {type(raw).__name__}.")
    if isinstance(raw, np.ndarray) and raw.ndim != 1:
        raise InvalidInputError(f"Embedding must be one-dimensional, got shape {raw.shape}.")
    if len(raw) != dim:
        raise InvalidInputError(f"Embedding must have exactly {dim} values, got {len(raw)}.")

    for i, value in enumerate(raw):
        # bool is an int subclass but never a valid component
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInputError(f"Embedding value at index {i} is not numeric: {value!r}")
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
        if not finite:
            raise InvalidInputError(f"Embedding value at index {i} is not finite or too large.")

    return np.asarray(raw, dtype=np.float64)

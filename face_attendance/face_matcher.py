# face_attendance/face_matcher.py
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from face_attendance.models import StudentEmbedding

logger = logging.getLogger(__name__)

MATCHED = "matched"
NO_MATCH = "no_match"
AMBIGUOUS = "ambiguous"

# Scores are compared at this precision so that a query sitting exactly on the
# threshold is not lost to float rounding.
SCORE_DECIMALS = 9


@dataclass(frozen=True)
class MatchResult:
    status: str
    student: Optional[StudentEmbedding] = None
    similarity: float = 0.0

    @property
    def matched(self):
        return self.status == MATCHED


def cosine_similarities(query: np.ndarray, refs: np.ndarray) -> np.ndarray:
    """Cosine similarity of `query` (d,) against every row of `refs` (n, d).

    Rows (or a query) with zero norm score 0.0.
    """
    ref_norms = np.linalg.norm(refs, axis=1)
    q_norm = np.linalg.norm(query)
    denom = ref_norms * q_norm
    dots = refs @ query
    sims = np.zeros(len(refs), dtype=np.float64)
    np.divide(dots, denom, out=sims, where=denom > 0)
    return np.round(sims, SCORE_DECIMALS)


def find_match(query_embedding: np.ndarray,
               students: Sequence[StudentEmbedding],
               threshold: float = 0.95,
               ambiguity_margin: float = 0.01) -> MatchResult:
    """
    Finds the best match for `query_embedding` among `students` (full scan).

    - best score below `threshold` -> NO_MATCH
    - runner-up also at/above `threshold` and within `ambiguity_margin` of the
      best -> AMBIGUOUS
    - otherwise -> MATCHED with the best student
    """
    if not students:
        logger.debug("Registry is empty - nothing to match against.")
        return MatchResult(NO_MATCH)

    refs = np.vstack([s.embedding for s in students]).astype(np.float64)
    sims = cosine_similarities(np.asarray(query_embedding, dtype=np.float64), refs)

    best_idx = int(np.argmax(sims))
    best_similarity = float(sims[best_idx])

    if best_similarity < threshold:
        return MatchResult(NO_MATCH, similarity=best_similarity)

    if len(sims) > 1:
        others = np.delete(sims, best_idx)
        second = float(others.max())
        gap = round(best_similarity - second, SCORE_DECIMALS)
        if second >= threshold and gap <= ambiguity_margin:
            logger.debug(
                f"Ambiguous match: best={best_similarity:.4f} "
                f"runner-up={second:.4f} (margin {ambiguity_margin})"
            )
            return MatchResult(AMBIGUOUS, similarity=best_similarity)

    return MatchResult(MATCHED, student=students[best_idx], similarity=best_similarity)

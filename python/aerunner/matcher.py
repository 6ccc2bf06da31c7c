"""Pick the compiled output that most likely corresponds to a source file.

Emitted files usually share their stem with the source and differ only by
directory prefix and extension, so candidates are ranked by how many
trailing characters of the extension-less paths agree.
"""

import os

from .errors import InvalidArgument
from .protocols import ScoredCandidate


def _strip_ext(path: str) -> str:
    return os.path.splitext(path)[0]


def suffix_score(reference: str, candidate: str) -> int:
    """Count consecutive equal characters from the end of both strings."""
    score = 0
    for a, b in zip(reversed(reference), reversed(candidate)):
        if a != b:
            break
        score += 1
    return score


def score_candidates(reference_path: str, candidate_paths: list[str]) -> list[ScoredCandidate]:
    """Score every candidate against reference_path, in input order."""
    ref_base = _strip_ext(reference_path)
    return [
        ScoredCandidate(path=p, score=suffix_score(ref_base, _strip_ext(p)))
        for p in candidate_paths
    ]


def select_best_match(reference_path: str, candidate_paths: list[str]) -> str:
    """Return the candidate whose stem shares the longest suffix with reference_path.

    Ties go to the earliest candidate in input order.

    Raises:
        InvalidArgument: candidate_paths is empty.
    """
    if not candidate_paths:
        raise InvalidArgument("candidate_paths must not be empty")

    scored = score_candidates(reference_path, candidate_paths)
    # sorted() is stable, so equal scores keep input order.
    scored = sorted(scored, key=lambda c: c.score, reverse=True)
    return scored[0].path

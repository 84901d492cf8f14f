"""Turns merged karma scores into the ranked report."""

from typing import Dict, List

from .errors import ComputationError
from .models import RankedEntry


def generate_karma_report(karma_scores: Dict[str, int]) -> List[RankedEntry]:
    """Rank reviewers by karma and relate each score to the average.

    The average is the floored mean over every reviewer in the map, including
    reviewers whose entry is zero.
    Reviewers with equal scores keep their input order.

    Args:
        karma_scores: Mapping of reviewer login to total karma

    Returns:
        Entries sorted by descending score

    Raises:
        ComputationError: If the map is empty or every score is zero
    """
    if not karma_scores:
        raise ComputationError("No review activity found; cannot compute an average karma score.")

    average = sum(karma_scores.values()) // len(karma_scores)
    if average == 0:
        raise ComputationError("Average karma score is zero; cannot compute percentages.")

    entries = [
        RankedEntry(reviewer=reviewer, score=score, percent_of_average=100 * score // average)
        for reviewer, score in karma_scores.items()
    ]
    # sorted() is stable, also with reverse=True
    return sorted(entries, key=lambda entry: entry.score, reverse=True)

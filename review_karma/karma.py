"""Karma scoring for single pull requests and merging of per-PR scores."""

from collections import defaultdict
from typing import Collection, Dict, Iterable, List

from .file_filters import FileFilter
from .models import FileChange, Review


def unique_reviewers(reviews: Iterable[Review]) -> List[str]:
    """Return reviewer logins in first-seen order without duplicates."""
    return list(dict.fromkeys(review.reviewer for review in reviews))


def compute_pull_request_karma(
    files: Iterable[FileChange],
    reviews: Iterable[Review],
    author: str,
    reviewer_universe: Collection[str],
    karma_per_review: int,
    karma_percent_per_comment: int,
    file_filter: FileFilter = None
) -> Dict[str, int]:
    """Compute the karma every team member earns for one pull request.

    Approving reviewers get ``karma_per_review + change_size``. Reviewers who
    only commented (or requested changes) get ``karma_percent_per_comment``
    percent of ``change_size``, truncated. A reviewer who both approved and
    commented only gets the approval score. The PR author never earns comment
    karma on their own PR, but a self-approval is still counted.

    Args:
        files: Changed files of the PR
        reviews: All reviews submitted on the PR
        author: Login of the PR author
        reviewer_universe: Logins of the team members being scored
        karma_per_review: Flat karma for an approval
        karma_percent_per_comment: Percentage of the change size for a comment review
        file_filter: Filter for lock files (uses the default patterns if None)

    Returns:
        Mapping of reviewer login to karma for this PR
    """
    file_filter = file_filter or FileFilter()
    reviews = list(reviews)
    change_size = file_filter.change_size(files)

    approving = [
        reviewer for reviewer in unique_reviewers(r for r in reviews if r.is_approval)
        if reviewer in reviewer_universe
    ]
    approving_set = set(approving)

    commenting = [
        reviewer for reviewer in unique_reviewers(r for r in reviews if not r.is_approval)
        if reviewer in reviewer_universe
        and reviewer not in approving_set
        and reviewer != author
    ]

    karma = {}
    for reviewer in approving:
        karma[reviewer] = karma_per_review + change_size
    for reviewer in commenting:
        # integer math keeps e.g. 29% of 100 at exactly 29
        karma[reviewer] = karma_percent_per_comment * change_size // 100

    return karma


def merge_karma_maps(karma_maps: Iterable[Dict[str, int]]) -> Dict[str, int]:
    """Sum per-PR karma maps into one score per reviewer.

    Reviewers appear in the order they are first seen. Reviewers without any
    contribution are absent; callers that want zero rows must add them.
    """
    merged = defaultdict(int)
    for karma_map in karma_maps:
        for reviewer, score in karma_map.items():
            merged[reviewer] += score
    return dict(merged)

"""Pull request processing methods for KarmaReportBuilder."""

import logging
from typing import Collection, Dict, List, Tuple
from concurrent.futures import ThreadPoolExecutor

from ..karma import compute_pull_request_karma
from ..models import FileChange, PullRequest, Review


def _process_pull_requests_parallel(self, pull_requests_per_repo: List[List[PullRequest]],
                                    reviewers: List[str]) -> List[Dict[str, int]]:
    """Fetch files and reviews of every PR and score them.

    Each PR starts after the throttle delay for its (repository, PR) position,
    measured from the start of this stage.

    Args:
        pull_requests_per_repo: Search results per repository, in repository order
        reviewers: Team member logins that can earn karma

    Returns:
        Per-PR karma maps ordered by repository, then by PR position
    """
    reviewer_universe = frozenset(reviewers)
    tasks = [
        (repo_index, pr_index, pr)
        for repo_index, prs in enumerate(pull_requests_per_repo)
        for pr_index, pr in enumerate(prs)
    ]
    if not tasks:
        return []

    logging.info(f"Analyzing {len(tasks)} PRs...")
    stage_start = self._clock()
    throttle = self.config.throttle

    def analyze(task):
        repo_index, pr_index, pr = task
        start_at = stage_start + throttle.delay_for(repo_index, pr_index)
        return self._analyze_pull_request(pr, start_at, reviewer_universe)

    return self._fan_out(analyze, tasks, 'PRs analyzed')


def _analyze_pull_request(self, pr: PullRequest, start_at: float,
                          reviewer_universe: Collection[str]) -> Dict[str, int]:
    """Score a single PR once its start time has come.

    Returns:
        Karma map for this PR (empty if the run was aborted while waiting)
    """
    if not self._wait_until(start_at):
        return {}

    files, reviews = self._fetch_pr_data(pr)
    karma = compute_pull_request_karma(
        files,
        reviews,
        pr.author,
        reviewer_universe,
        self.config.karma_per_review,
        self.config.karma_percent_per_comment,
        self.file_filter
    )
    logging.debug(f"{pr.repository}#{pr.number} by {pr.author}: {karma}")
    return karma


def _fetch_pr_data(self, pr: PullRequest) -> Tuple[List[FileChange], List[Review]]:
    """Fetch files and reviews of a PR in parallel.

    Returns:
        Tuple of (files, reviews)
    """
    org = self.config.org
    with ThreadPoolExecutor(max_workers=2) as executor:
        future_files = executor.submit(self.api_client.list_pull_request_files, org, pr.repository, pr.number)
        future_reviews = executor.submit(self.api_client.list_pull_request_reviews, org, pr.repository, pr.number)

        return future_files.result(), future_reviews.result()


def _wait_until(self, start_at: float) -> bool:
    """Sleep until ``start_at`` on the builder clock.

    Returns:
        False if the run was aborted before or during the wait
    """
    delay = start_at - self._clock()
    if delay > 0:
        return not self._abort.wait(delay)
    return not self._abort.is_set()

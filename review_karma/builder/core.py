"""Main code review karma report builder."""

import time
import logging
import threading
from datetime import date
from typing import Callable, List, Sequence, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..api_client import GitHubAPIClient
from ..config import ReportConfig
from ..file_filters import FileFilter
from ..karma import merge_karma_maps
from ..models import RankedEntry, ReportStatistics
from ..ranking import generate_karma_report


class KarmaReportBuilder:
    """Fetches team, repository and pull request data and scores reviewers.

    Stages run one after another; inside a stage all requests fan out over a
    bounded thread pool. Each worker returns its own result and the results
    are combined on the calling thread, so no state is shared between workers.
    """

    def __init__(
        self,
        config: ReportConfig,
        api_client: GitHubAPIClient = None,
        today: date = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """Initialize the builder.

        Args:
            config: Report configuration, validated here before any request
            api_client: Client to use (a new one is created from the config if None)
            today: UTC date the day window is counted from (defaults to the current date)
            clock: Monotonic clock used for the request throttle
        """
        config.validate()
        self.config = config
        self.api_client = api_client or GitHubAPIClient(
            config.access_token,
            timeout=config.request_timeout,
            pool_size=config.max_workers
        )
        self.file_filter = FileFilter(config.excluded_file_patterns)
        self.today = today
        self._clock = clock
        self._abort = threading.Event()

        logging.info(f"Initialized karma report builder for org '{config.org}', "
                     f"teams: {', '.join(config.team_names)}")

    def build(self) -> Tuple[List[RankedEntry], ReportStatistics]:
        """Run the whole pipeline.

        Returns:
            Ranked entries and statistics about the run

        Raises:
            KarmaReportError: Any failure aborts the run; there is no partial report
        """
        self._abort.clear()
        since_date = merged_since_date(self.config.days_to_report, self.today)
        logging.info(f"Looking for PRs merged since: {since_date.isoformat()}")

        teams = self._select_teams()
        reviewers, repositories = self._collect_team_data(teams)
        pull_requests_per_repo = self._search_repositories(repositories, since_date)
        pull_request_count = sum(len(prs) for prs in pull_requests_per_repo)
        logging.info(f"Found {pull_request_count} merged PRs in {len(repositories)} repositories")

        karma_maps = self._process_pull_requests_parallel(pull_requests_per_repo, reviewers)
        karma_scores = merge_karma_maps(karma_maps)

        statistics = ReportStatistics(
            pull_request_count=pull_request_count,
            reviewers=reviewers,
            omitted_reviewers=[r for r in reviewers if r not in karma_scores],
            teams=[team.name for team in teams]
        )
        return generate_karma_report(karma_scores), statistics

    def _fan_out(self, func: Callable, items: Sequence, label: str) -> list:
        """Run ``func`` over ``items`` concurrently and return results in item order.

        The first failure stops the stage: queued work is cancelled, delayed
        workers are told to give up, and the exception is re-raised.

        Args:
            func: Callable applied to each item
            items: Work items
            label: Name of the stage for progress logging

        Returns:
            One result per item, in the order of ``items``
        """
        items = list(items)
        if not items:
            return []

        results = [None] * len(items)
        completed = 0
        executor = ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(items)))
        try:
            future_to_index = {
                executor.submit(func, item): index
                for index, item in enumerate(items)
            }

            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()
                completed += 1

                if completed % 10 == 0 or completed == len(items):
                    logging.info(f"  Progress: {completed}/{len(items)} {label}")
        except Exception:
            self._abort.set()
            executor.shutdown(wait=False, cancel_futures=True)
            raise

        executor.shutdown(wait=True)
        return results


# Import and attach methods from submodules
from .team_stages import merged_since_date, _select_teams, _collect_team_data, _search_repositories
from .pr_processing import _process_pull_requests_parallel, _analyze_pull_request, _fetch_pr_data, _wait_until

# Attach methods to class
KarmaReportBuilder._select_teams = _select_teams
KarmaReportBuilder._collect_team_data = _collect_team_data
KarmaReportBuilder._search_repositories = _search_repositories
KarmaReportBuilder._process_pull_requests_parallel = _process_pull_requests_parallel
KarmaReportBuilder._analyze_pull_request = _analyze_pull_request
KarmaReportBuilder._fetch_pr_data = _fetch_pr_data
KarmaReportBuilder._wait_until = _wait_until


def build_report(config: ReportConfig, api_client: GitHubAPIClient = None) -> Tuple[List[RankedEntry], ReportStatistics]:
    """Build a karma report for the configured teams.

    Args:
        config: Report configuration
        api_client: Optional pre-built client

    Returns:
        Ranked entries and run statistics
    """
    return KarmaReportBuilder(config, api_client).build()

"""Team, member, repository and search stages for KarmaReportBuilder."""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Tuple

from ..errors import ConfigurationError
from ..models import PullRequest, Team


def merged_since_date(days_to_report: int, today: date = None) -> date:
    """Return the first UTC calendar day of the report window (inclusive)."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    return today - timedelta(days=days_to_report)


def is_merged_since(pull_request: PullRequest, since_date: date) -> bool:
    """Check a search result's merge date against the window.

    Results without a merge timestamp are trusted, the search query already
    filtered them.
    """
    if not pull_request.merged_at:
        return True
    merged_at = datetime.fromisoformat(pull_request.merged_at.replace('Z', '+00:00'))
    return merged_at.astimezone(timezone.utc).date() >= since_date


def _select_teams(self) -> List[Team]:
    """Fetch the organization's teams and keep the configured ones.

    Names are compared exactly; ``core`` does not select ``core-platform``.

    Raises:
        ConfigurationError: If none of the configured teams exist
    """
    org = self.config.org
    wanted = self.config.team_names
    teams = self.api_client.list_teams(org)
    selected = [team for team in teams if team.name in wanted]

    found_names = {team.name for team in selected}
    for name in wanted:
        if name not in found_names:
            logging.warning(f"Team '{name}' not found in the {org} organization")

    if not selected:
        raise ConfigurationError(
            f"None of the configured teams ({', '.join(wanted)}) exist in the {org} organization")

    logging.info(f"Selected {len(selected)} team(s): {', '.join(team.name for team in selected)}")
    return selected


def _collect_team_data(self, teams: List[Team]) -> Tuple[List[str], List[str]]:
    """Fetch members and repositories of every team.

    Member and repository requests of all teams share one concurrent batch.

    Returns:
        Tuple of (deduplicated member logins, deduplicated repository names),
        both in first-seen order
    """
    org = self.config.org
    fetchers = {
        'members': self.api_client.list_team_members,
        'repositories': self.api_client.list_team_repositories,
    }
    team_requests = [(team, kind) for team in teams for kind in fetchers]

    results = self._fan_out(
        lambda request: fetchers[request[1]](org, request[0].slug), team_requests, 'team requests')

    members_per_team = [result for (_, kind), result in zip(team_requests, results) if kind == 'members']
    repos_per_team = [result for (_, kind), result in zip(team_requests, results) if kind == 'repositories']

    reviewers = list(dict.fromkeys(login for members in members_per_team for login in members))
    repositories = list(dict.fromkeys(name for repos in repos_per_team for name in repos))

    logging.info(f"Found {len(reviewers)} team members and {len(repositories)} repositories")
    return reviewers, repositories


def _search_repositories(self, repositories: List[str], since_date: date) -> List[List[PullRequest]]:
    """Search merged PRs for every repository.

    Returns:
        One list of pull requests per repository, in repository order
    """
    org = self.config.org
    excluded_author = self.config.excluded_author

    def search(repo: str) -> List[PullRequest]:
        prs = self.api_client.search_merged_pull_requests(org, repo, since_date, excluded_author)
        recent = [pr for pr in prs if is_merged_since(pr, since_date)]
        logging.debug(f"{org}/{repo}: {len(recent)} merged PRs since {since_date.isoformat()}")
        return recent

    return self._fan_out(search, repositories, 'repositories searched')

"""GitHub API client for making requests and handling pagination."""

import logging
from datetime import date
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import RateLimitedError, RemoteError
from .models import FileChange, PullRequest, Review, Team


GITHUB_API_BASE = 'https://api.github.com'
PER_PAGE = 50
SEARCH_RESULT_CAP = 1000  # GitHub search never returns more than this per query

# Documentation links GitHub attaches to secondary ("abuse") rate limit responses
RATE_LIMIT_DOC_MARKERS = ('abuse-rate-limits', 'secondary-rate-limits')


def build_merged_pr_query(org: str, repo: str, since_date: date, excluded_author: str = None) -> str:
    """Build the search query for PRs merged on or after ``since_date``."""
    query = f"repo:{org}/{repo} is:pr merged:>={since_date.isoformat()}"
    if excluded_author:
        query += f" -author:{excluded_author}"
    return query


class GitHubAPIClient:
    """Handles GitHub API requests, pagination and error classification.

    The client never retries and never exits the process: every failed call
    raises ``RateLimitedError`` or ``RemoteError`` for the caller to handle.
    """

    def __init__(self, token: str, timeout: int = 30, pool_size: int = 10,
                 base_url: str = GITHUB_API_BASE):
        """Initialize the GitHub API client.

        Args:
            token: GitHub personal access token for authentication
            timeout: Per-request timeout in seconds
            pool_size: Number of concurrent workers that share this client
            base_url: API root, overridable for GitHub Enterprise
        """
        self.token = token
        self.timeout = timeout
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()

        # Each PR worker issues two requests at once (files + reviews)
        adapter = HTTPAdapter(
            pool_connections=10,
            pool_maxsize=pool_size * 2 + 10,
            max_retries=Retry(total=0, raise_on_status=False)
        )
        self.session.mount('https://', adapter)
        self.session.mount('http://', adapter)

        self.session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json'
        })
        logging.info("Initialized GitHub API client with token")

    def get_paginated(self, url: str, params: Dict = None) -> List[Dict]:
        """Fetch all pages of a paginated GitHub API endpoint.

        Follows the ``Link: rel="next"`` header until it disappears. Search
        endpoints wrap their results in ``items``; those are unwrapped.

        Args:
            url: The API endpoint URL
            params: Query parameters for the first page

        Returns:
            List of all items from all pages, in page order

        Raises:
            RateLimitedError: If GitHub's rate limiting rejected a page
            RemoteError: If any page failed for another reason
        """
        results = []
        page = 1
        params = dict(params or {})
        params['per_page'] = PER_PAGE

        while url:
            logging.debug(f"Fetching page {page} from {url}")
            response = self._request(url, params)

            try:
                data = response.json()
            except ValueError as e:
                raise RemoteError(f"Invalid JSON response from {url}", response.status_code) from e

            if isinstance(data, dict):
                total_count = data.get('total_count', 0)
                if page == 1 and total_count > SEARCH_RESULT_CAP:
                    logging.warning(f"Search at {url} matched {total_count} results, "
                                    f"only the first {SEARCH_RESULT_CAP} are available")
                data = data.get('items', [])

            results.extend(data)

            next_link = response.links.get('next')
            url = next_link['url'] if next_link else None
            # The next link already carries the query string
            params = None
            page += 1

        logging.debug(f"Fetched {len(results)} total items")
        return results

    def _request(self, url: str, params: Optional[Dict]) -> requests.Response:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteError(str(e)) from e

        self._raise_for_error(response)
        return response

    @staticmethod
    def _raise_for_error(response: requests.Response):
        """Translate an error response into a typed exception.

        Args:
            response: Response of a single API call

        Raises:
            RateLimitedError: For secondary rate limits or an exhausted primary limit
            RemoteError: For every other status >= 400
        """
        status = response.status_code
        if status < 400:
            return

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get('message') or response.reason or f"HTTP {status}"
        documentation_url = body.get('documentation_url') or ''

        if any(marker in documentation_url for marker in RATE_LIMIT_DOC_MARKERS):
            logging.error(f"Secondary rate limit hit: {message}")
            raise RateLimitedError(documentation_url=documentation_url)

        if status in (403, 429) and response.headers.get('X-RateLimit-Remaining') == '0':
            logging.error(f"Primary rate limit exhausted: {message}")
            raise RateLimitedError(documentation_url=documentation_url or None)

        raise RemoteError(message, status, documentation_url or None)

    # Endpoint helpers

    def list_teams(self, org: str) -> List[Team]:
        teams = self.get_paginated(f"{self.base_url}/orgs/{org}/teams")
        return [Team(id=t['id'], name=t['name'], slug=t['slug']) for t in teams]

    def list_team_members(self, org: str, team_slug: str) -> List[str]:
        members = self.get_paginated(f"{self.base_url}/orgs/{org}/teams/{team_slug}/members")
        return [member['login'] for member in members]

    def list_team_repositories(self, org: str, team_slug: str) -> List[str]:
        repos = self.get_paginated(f"{self.base_url}/orgs/{org}/teams/{team_slug}/repos")
        return [repo['name'] for repo in repos]

    def search_merged_pull_requests(self, org: str, repo: str, since_date: date,
                                    excluded_author: str = None) -> List[PullRequest]:
        """Search merged PRs of one repository.

        Args:
            org: Organization that owns the repository
            repo: Repository name
            since_date: Earliest merge date (inclusive)
            excluded_author: Login whose PRs are left out, usually a bot

        Returns:
            Matching pull requests in search order
        """
        query = build_merged_pr_query(org, repo, since_date, excluded_author)
        items = self.get_paginated(f"{self.base_url}/search/issues", {'q': query})
        return [
            PullRequest(
                repository=repo,
                number=item['number'],
                author=item['user']['login'],
                merged_at=(item.get('pull_request') or {}).get('merged_at'),
            )
            for item in items
        ]

    def list_pull_request_files(self, org: str, repo: str, number: int) -> List[FileChange]:
        files = self.get_paginated(f"{self.base_url}/repos/{org}/{repo}/pulls/{number}/files")
        return [FileChange(filename=f['filename'], additions=f.get('additions', 0)) for f in files]

    def list_pull_request_reviews(self, org: str, repo: str, number: int) -> List[Review]:
        reviews = self.get_paginated(f"{self.base_url}/repos/{org}/{repo}/pulls/{number}/reviews")
        # Reviews of deleted accounts come back without a user
        return [
            Review(reviewer=r['user']['login'], state=r['state'])
            for r in reviews
            if r.get('user')
        ]

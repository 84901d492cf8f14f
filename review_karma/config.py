"""
Report configuration for the code review karma tool.

Holds the tunable scoring constants, the request throttle schedule and the
environment variable parsing used by the launcher and the Slack handler.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .errors import ConfigurationError
from .file_filters import DEFAULT_EXCLUDED_FILE_PATTERNS


KARMA_PER_REVIEW = 50  # karma each approving reviewer gets per PR, on top of the PR size
KARMA_PERCENT_PER_COMMENT = 25  # percentage of added lines given to commenting reviewers
DAYS_TO_REPORT = 30
EXCLUDED_AUTHOR = 'optibot-cd'  # bot account whose PRs are never scored
MAX_WORKERS = 10
REQUEST_TIMEOUT = 30  # seconds


@dataclass(frozen=True)
class ThrottleSchedule:
    """Start offsets for per-PR requests.

    Each PR's file/review fetches start at
    ``base + per_pr * pr_index + per_repo * repo_index`` milliseconds after the
    PR stage begins, so the number of outstanding requests ramps up instead of
    spiking and GitHub's abuse detection stays quiet.
    """
    base_delay_ms: int = 5
    per_pr_delay_ms: int = 10
    per_repo_delay_ms: int = 100

    def delay_for(self, repo_index: int, pr_index: int) -> float:
        """Return the start offset in seconds for a PR.

        Args:
            repo_index: Position of the repository in the deduplicated repository list
            pr_index: Position of the PR within its repository's search results

        Returns:
            Delay in seconds
        """
        delay_ms = (self.base_delay_ms
                    + self.per_pr_delay_ms * pr_index
                    + self.per_repo_delay_ms * repo_index)
        return delay_ms / 1000.0


@dataclass
class ReportConfig:
    """Everything a report run needs to know."""
    access_token: str
    org: str
    team_names: List[str]
    days_to_report: int = DAYS_TO_REPORT
    karma_per_review: int = KARMA_PER_REVIEW
    karma_percent_per_comment: int = KARMA_PERCENT_PER_COMMENT
    excluded_author: Optional[str] = EXCLUDED_AUTHOR
    excluded_file_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_FILE_PATTERNS))
    max_workers: int = MAX_WORKERS
    throttle: ThrottleSchedule = field(default_factory=ThrottleSchedule)
    request_timeout: int = REQUEST_TIMEOUT

    def validate(self):
        """Fail before any request is sent if required settings are missing.

        Raises:
            ConfigurationError: If the token, organization or teams are missing,
                or a numeric setting is out of range
        """
        if not self.access_token:
            raise ConfigurationError(
                "You must populate a github personal access token in the GITHUB_ACCESS_TOKEN env variable.")
        if not self.org:
            raise ConfigurationError(
                "You must populate a github organization name in the GITHUB_ORG env variable.")
        if not [name for name in self.team_names if name]:
            raise ConfigurationError(
                "You must populate one or more comma-separated github team names in the GITHUB_TEAMS env variable.")

        for name in ('days_to_report', 'karma_per_review', 'karma_percent_per_comment'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative (got {getattr(self, name)})")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1 (got {self.max_workers})")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None, overrides: Dict[str, object] = None) -> 'ReportConfig':
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
            overrides: Values that take precedence over the environment, keyed by field name

        Returns:
            The configuration (not yet validated)
        """
        environ = os.environ if environ is None else environ
        overrides = overrides or {}

        token = environ.get('GITHUB_ACCESS_TOKEN') or environ.get('GITHUB_TOKEN', '')
        teams_env = environ.get('GITHUB_TEAMS', '')

        excluded_file_patterns = list(DEFAULT_EXCLUDED_FILE_PATTERNS)
        patterns_env = environ.get('EXCLUDED_FILE_PATTERNS')
        if patterns_env:
            excluded_file_patterns = [p.strip() for p in patterns_env.split(',') if p.strip()]
            logging.info(f"Using custom excluded file patterns: {', '.join(excluded_file_patterns)}")

        excluded_author = environ.get('EXCLUDED_AUTHOR', EXCLUDED_AUTHOR).strip() or None

        values = {
            'access_token': token,
            'org': environ.get('GITHUB_ORG', '').strip(),
            'team_names': split_team_names(teams_env),
            'days_to_report': _int_from_env(environ, 'DAYS_TO_REPORT', DAYS_TO_REPORT),
            'karma_per_review': _int_from_env(environ, 'KARMA_PER_REVIEW', KARMA_PER_REVIEW),
            'karma_percent_per_comment': _int_from_env(environ, 'KARMA_PERCENT_PER_COMMENT',
                                                       KARMA_PERCENT_PER_COMMENT),
            'excluded_author': excluded_author,
            'excluded_file_patterns': excluded_file_patterns,
            'max_workers': _int_from_env(environ, 'MAX_WORKERS', MAX_WORKERS),
            'throttle': ThrottleSchedule(
                base_delay_ms=_int_from_env(environ, 'THROTTLE_BASE_DELAY_MS', 5),
                per_pr_delay_ms=_int_from_env(environ, 'THROTTLE_PER_PR_DELAY_MS', 10),
                per_repo_delay_ms=_int_from_env(environ, 'THROTTLE_PER_REPO_DELAY_MS', 100),
            ),
        }
        values.update(overrides)
        return cls(**values)


def split_team_names(teams: str) -> List[str]:
    """Split a comma-separated team list, dropping blanks."""
    return [t.strip() for t in (teams or '').split(',') if t.strip()]


def _int_from_env(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        logging.warning(f"Invalid {name} value '{value}', using default: {default}")
        return default

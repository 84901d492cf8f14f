"""Code Review Karma - ranks team members by the code review work they did."""

from .models import Team, PullRequest, FileChange, Review, RankedEntry, ReportStatistics
from .errors import KarmaReportError, RateLimitedError, RemoteError, ConfigurationError, ComputationError
from .config import ReportConfig, ThrottleSchedule
from .api_client import GitHubAPIClient
from .file_filters import FileFilter, DEFAULT_EXCLUDED_FILE_PATTERNS
from .karma import compute_pull_request_karma, merge_karma_maps
from .ranking import generate_karma_report
from .builder import KarmaReportBuilder, build_report
from .output import ReportFormatter

__all__ = [
    'Team',
    'PullRequest',
    'FileChange',
    'Review',
    'RankedEntry',
    'ReportStatistics',
    'KarmaReportError',
    'RateLimitedError',
    'RemoteError',
    'ConfigurationError',
    'ComputationError',
    'ReportConfig',
    'ThrottleSchedule',
    'GitHubAPIClient',
    'FileFilter',
    'DEFAULT_EXCLUDED_FILE_PATTERNS',
    'compute_pull_request_karma',
    'merge_karma_maps',
    'generate_karma_report',
    'KarmaReportBuilder',
    'build_report',
    'ReportFormatter',
]

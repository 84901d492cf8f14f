"""Report builder: staged, throttled fan-out over the GitHub API."""

from .core import KarmaReportBuilder, build_report
from .team_stages import merged_since_date, is_merged_since

__all__ = [
    'KarmaReportBuilder',
    'build_report',
    'merged_since_date',
    'is_merged_since',
]

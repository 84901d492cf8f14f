"""Error types raised while building a code review karma report."""

from typing import Optional


RATE_LIMIT_MESSAGE = (
    "Use of this tool has triggered GitHub's abuse detection mechanism due to too many "
    "API requests being sent. Please wait a few minutes and try again."
)


class KarmaReportError(Exception):
    """Base class for every failure that stops a report from being produced."""


class RateLimitedError(KarmaReportError):
    """GitHub refused the request because of (secondary) rate limiting."""

    def __init__(self, message: str = RATE_LIMIT_MESSAGE, documentation_url: str = None):
        super().__init__(message)
        self.documentation_url = documentation_url


class RemoteError(KarmaReportError):
    """Any other failed GitHub API call; the remote message is kept verbatim."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 documentation_url: str = None):
        super().__init__(f"GitHub Error: {message}")
        self.remote_message = message
        self.status_code = status_code
        self.documentation_url = documentation_url


class ConfigurationError(KarmaReportError):
    """Required settings are missing or no configured team exists."""


class ComputationError(KarmaReportError):
    """The collected data cannot be turned into a ranking (e.g. no scores at all)."""

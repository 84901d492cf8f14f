"""Data models for code review karma reports."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Team:
    """A GitHub team inside the organization."""
    id: int
    name: str
    slug: str


@dataclass(frozen=True)
class PullRequest:
    """A merged pull request found by the search stage."""
    repository: str
    number: int
    author: str
    merged_at: Optional[str] = None


@dataclass(frozen=True)
class FileChange:
    filename: str
    additions: int = 0


@dataclass(frozen=True)
class Review:
    reviewer: str
    state: str  # APPROVED, CHANGES_REQUESTED, COMMENTED, DISMISSED, PENDING

    @property
    def is_approval(self) -> bool:
        return self.state == 'APPROVED'


@dataclass(frozen=True)
class RankedEntry:
    """One row of the final karma report."""
    reviewer: str
    score: int
    percent_of_average: int


@dataclass
class ReportStatistics:
    """Facts about the run that produced a report."""
    pull_request_count: int = 0
    reviewers: List[str] = field(default_factory=list)  # deduplicated team members
    omitted_reviewers: List[str] = field(default_factory=list)  # members without karma
    teams: List[str] = field(default_factory=list)

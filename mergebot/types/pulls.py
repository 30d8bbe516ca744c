"""Pull request and review data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ReviewState(str, Enum):
    """State of a submitted pull request review."""

    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class PullRequestRef:
    """Identity of a pull request: enough to refetch it."""

    owner: str
    repo: str
    number: int

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo} #{self.number}"


@dataclass
class PullRequest:
    """Pull request snapshot as returned by GitHub."""

    owner: str
    repo: str
    number: int
    head_sha: str
    base_ref: str
    state: str  # "open", "closed"
    merged: bool
    mergeable: bool | None  # None while GitHub is still computing it
    title: str = ""

    @property
    def ref(self) -> PullRequestRef:
        return PullRequestRef(self.owner, self.repo, self.number)


@dataclass
class Review:
    """Pull request review."""

    review_id: int
    user: str
    state: ReviewState
    submitted_at: datetime | None


@dataclass
class MergeResult:
    """Result of merging a pull request."""

    sha: str
    merged: bool
    message: str

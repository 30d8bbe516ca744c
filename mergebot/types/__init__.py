"""mergebot type definitions.

This module exports all data model types used by the bot.
"""

from mergebot.types.checks import CheckConclusion, CheckRun, CheckStatus
from mergebot.types.pulls import (
    MergeResult,
    PullRequest,
    PullRequestRef,
    Review,
    ReviewState,
)

__all__ = [
    # Pull request types
    "PullRequest",
    "PullRequestRef",
    "Review",
    "ReviewState",
    "MergeResult",
    # Check types
    "CheckRun",
    "CheckStatus",
    "CheckConclusion",
]

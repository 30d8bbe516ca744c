"""
Merge policy evaluation.

``evaluate`` is a pure function of the pull request snapshot, the aggregated
review and check state and the repository config. Rules are applied in a
fixed order and the first one that matches decides.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from mergebot.aggregate import CheckAggregate
from mergebot.config import MergeConfig
from mergebot.types.checks import CheckConclusion
from mergebot.types.pulls import PullRequest, ReviewState

DEFAULT_RECHECK_DELAY = 60.0

BLOCKING_CONCLUSIONS = frozenset(
    {
        CheckConclusion.FAILURE,
        CheckConclusion.CANCELLED,
        CheckConclusion.TIMED_OUT,
        CheckConclusion.ACTION_REQUIRED,
    }
)


class Outcome(str, Enum):
    MERGE = "merge"
    BLOCKED = "blocked"
    PENDING = "pending"


@dataclass(frozen=True)
class MergeDecision:
    """What to do with a pull request after one evaluation."""

    outcome: Outcome
    reason: str = ""
    retry_after: float | None = None

    @classmethod
    def merge(cls) -> "MergeDecision":
        return cls(Outcome.MERGE, "all conditions met")

    @classmethod
    def blocked(cls, reason: str) -> "MergeDecision":
        return cls(Outcome.BLOCKED, reason)

    @classmethod
    def pending(cls, retry_after: float) -> "MergeDecision":
        return cls(Outcome.PENDING, "checks still running", retry_after)

    @property
    def is_merge(self) -> bool:
        return self.outcome is Outcome.MERGE

    @property
    def is_blocked(self) -> bool:
        return self.outcome is Outcome.BLOCKED

    @property
    def is_pending(self) -> bool:
        return self.outcome is Outcome.PENDING


def count_states(review_state: Mapping[str, ReviewState], state: ReviewState) -> int:
    return sum(1 for s in review_state.values() if s == state)


def evaluate(
    pull_request: PullRequest,
    review_state: Mapping[str, ReviewState],
    config: MergeConfig,
    checks: CheckAggregate,
    recheck_delay: float = DEFAULT_RECHECK_DELAY,
) -> MergeDecision:
    """
    Decide whether a pull request can be merged now.

    Note the review thresholds are cross-wired: change requests are compared
    with ``min_approvals`` and approvals with ``max_requested_changes``.
    """
    if pull_request.state != "open":
        return MergeDecision.blocked("not open")

    if pull_request.merged:
        return MergeDecision.blocked("already merged")

    if pull_request.mergeable is not True:
        return MergeDecision.blocked("not mergeable")

    rejections = count_states(review_state, ReviewState.CHANGES_REQUESTED)
    if rejections > config.min_approvals:
        return MergeDecision.blocked(
            f"too many change requests ({rejections} / {config.min_approvals})"
        )

    approvals = count_states(review_state, ReviewState.APPROVED)
    if approvals < config.max_requested_changes:
        return MergeDecision.blocked(
            f"not enough approvals ({approvals} / {config.max_requested_changes})"
        )

    if not checks.all_completed:
        return MergeDecision.pending(recheck_delay)

    blocking = checks.conclusions & BLOCKING_CONCLUSIONS
    if blocking:
        names = ", ".join(sorted(c.value for c in blocking))
        return MergeDecision.blocked(f"blocking check conclusion ({names})")

    return MergeDecision.merge()

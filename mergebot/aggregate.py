"""Reduction of review history and check runs into evaluable state."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from mergebot.types.checks import CheckConclusion, CheckRun, CheckStatus
from mergebot.types.pulls import Review, ReviewState

# Pending reviews have no submission time; they order before any submitted one.
_NOT_SUBMITTED = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class CheckAggregate:
    """Completion flag and distinct conclusions of a commit's check runs."""

    all_completed: bool
    conclusions: frozenset[CheckConclusion] = field(default_factory=frozenset)


def _submitted_at(review: Review) -> datetime:
    ts = review.submitted_at
    if ts is None:
        return _NOT_SUBMITTED
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def aggregate_reviews(reviews: Iterable[Review]) -> dict[str, ReviewState]:
    """
    Reduce a review history to each reviewer's most recent state.

    Reviews are ordered by submission time; the sort is stable, so reviews
    submitted at the same instant keep their input order and the later one
    wins.
    """
    latest: dict[str, ReviewState] = {}
    for review in sorted(reviews, key=_submitted_at):
        latest[review.user] = review.state
    return latest


def aggregate_checks(check_runs: Iterable[CheckRun]) -> CheckAggregate:
    """
    Reduce check runs to a completion flag and the set of conclusions.

    No check runs means nothing is blocking: the result is completed with no
    conclusions.
    """
    all_completed = True
    conclusions: set[CheckConclusion] = set()
    for check_run in check_runs:
        if check_run.status != CheckStatus.COMPLETED:
            all_completed = False
        elif check_run.conclusion is not None:
            conclusions.add(check_run.conclusion)
    return CheckAggregate(all_completed=all_completed, conclusions=frozenset(conclusions))


def format_review_summary(review_state: dict[str, ReviewState]) -> str:
    return "\n".join(f"{user}: {state.value}" for user, state in review_state.items())


def format_check_summary(check_runs: Iterable[CheckRun]) -> str:
    return "\n".join(
        f"{run.name}: {run.status.value}: {run.conclusion.value if run.conclusion else None}"
        for run in check_runs
    )

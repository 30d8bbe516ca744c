"""
Merge decision engine.

One evaluation cycle: fetch the pull request, its reviews and the head
commit's check runs, reduce them, evaluate the policy and act on the
decision.
"""

import logging
from typing import Any

from mergebot.aggregate import (
    aggregate_checks,
    aggregate_reviews,
    format_check_summary,
    format_review_summary,
)
from mergebot.config import MergeConfig
from mergebot.exceptions import ConflictError
from mergebot.logging import PullRequestLogAdapter, get_logger
from mergebot.policy import MergeDecision, evaluate
from mergebot.scheduler import RecheckConfig, RecheckScheduler
from mergebot.types.pulls import PullRequestRef


class MergeEngine:
    """
    Evaluates pull requests and merges the ones that pass.

    Args:
        client: Object exposing async ``pulls``, ``reviews`` and ``checks``
            resource clients (AsyncGitHubClient or MockGitHubClient)
        scheduler: Where rechecks for pending checks are submitted
        logger: Destination for the per pull request diagnostics
        merge_method: Merge strategy passed to GitHub
        recheck: Delay between rechecks and the maximum number of rechecks
    """

    def __init__(
        self,
        client: Any,
        scheduler: RecheckScheduler | None = None,
        logger: logging.Logger | None = None,
        merge_method: str = "merge",
        recheck: RecheckConfig | None = None,
    ) -> None:
        self.client = client
        self.logger = logger or get_logger("engine")
        self.scheduler = scheduler or RecheckScheduler(self.logger)
        self.merge_method = merge_method
        self.recheck = recheck or RecheckConfig()

    async def evaluate(
        self, ref: PullRequestRef, config: MergeConfig, attempt: int = 0
    ) -> MergeDecision:
        """
        Run one full evaluation cycle for a pull request and act on it.

        Args:
            ref: The pull request to evaluate; its state is always refetched
            config: Review thresholds for the repository
            attempt: Number of rechecks already spent on pending checks

        Returns:
            The decision that was acted on

        Raises:
            MergeBotError: If a GitHub read or the merge call fails (other than
                GitHub refusing the merge)
        """
        log = PullRequestLogAdapter(self.logger, ref)

        pull_request = await self.client.pulls.get(ref.owner, ref.repo, ref.number)
        reviews = await self.client.reviews.list(ref.owner, ref.repo, ref.number)
        check_runs = await self.client.checks.list_for_ref(
            ref.owner, ref.repo, pull_request.head_sha, filter="latest"
        )

        review_state = aggregate_reviews(reviews)
        log.info("Reviews:\n%s", format_review_summary(review_state))
        checks = aggregate_checks(check_runs)
        log.info("Checks:\n%s", format_check_summary(check_runs))

        decision = evaluate(
            pull_request, review_state, config, checks, recheck_delay=self.recheck.delay
        )

        if decision.is_merge:
            return await self._merge(ref, log)

        if decision.is_pending:
            return self._schedule_recheck(ref, config, attempt, decision, log)

        log.info("Not merging: %s", decision.reason)
        return decision

    async def _merge(self, ref: PullRequestRef, log: PullRequestLogAdapter) -> MergeDecision:
        try:
            result = await self.client.pulls.merge(
                ref.owner, ref.repo, ref.number, merge_method=self.merge_method
            )
        except ConflictError as e:
            # Another evaluation (or a human) got there first.
            log.info("GitHub rejected the merge: %s", e.message)
            return MergeDecision.blocked(f"merge rejected: {e.message}")

        log.info("Merged pull request (%s)", result.sha or result.message)
        return MergeDecision.merge()

    def _schedule_recheck(
        self,
        ref: PullRequestRef,
        config: MergeConfig,
        attempt: int,
        decision: MergeDecision,
        log: PullRequestLogAdapter,
    ) -> MergeDecision:
        if attempt >= self.recheck.max_rechecks:
            log.warning(
                "Checks still pending after %d rechecks, giving up", attempt
            )
            return MergeDecision.blocked(f"checks still pending after {attempt} rechecks")

        delay = decision.retry_after if decision.retry_after is not None else self.recheck.delay
        log.info("There are still pending checks. Rechecking in %ss", delay)
        self.scheduler.schedule(delay, self.evaluate, ref, config, attempt + 1)
        return decision

#!/usr/bin/env python3
"""
mergebot - Evaluate a single pull request

Runs one evaluation cycle against a real pull request and prints the
decision. With --dry-run nothing is merged and no recheck is scheduled.

Usage:
    GITHUB_TOKEN=ghp_... python examples/evaluate_pull_request.py octo-org/hello-world 42
"""

import argparse
import asyncio
import logging
import sys

from mergebot import (
    AsyncGitHubClient,
    ConfigLoader,
    MergeBotError,
    MergeEngine,
    PullRequestRef,
    aggregate_checks,
    aggregate_reviews,
    configure_logging,
    evaluate,
)


async def run(ref: PullRequestRef, dry_run: bool) -> int:
    async with AsyncGitHubClient.from_env() as client:
        config = await ConfigLoader(client).load(ref.owner, ref.repo)
        print(f"Config: min-approvals={config.min_approvals} "
              f"max-requested-changes={config.max_requested_changes}")

        if dry_run:
            pull_request = await client.pulls.get(ref.owner, ref.repo, ref.number)
            reviews = await client.reviews.list(ref.owner, ref.repo, ref.number)
            check_runs = await client.checks.list_for_ref(
                ref.owner, ref.repo, pull_request.head_sha
            )
            decision = evaluate(
                pull_request,
                aggregate_reviews(reviews),
                config,
                aggregate_checks(check_runs),
            )
        else:
            engine = MergeEngine(client)
            decision = await engine.evaluate(ref, config)
            if decision.is_pending:
                print("Checks are still running; waiting for the scheduled recheck...")
                await engine.scheduler.drain()

    print(f"{ref}: {decision.outcome.value} ({decision.reason})")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Evaluate one pull request for auto-merge")
    parser.add_argument("repository", help="owner/repo")
    parser.add_argument("number", type=int, help="pull request number")
    parser.add_argument("--dry-run", action="store_true", help="decide without merging")
    args = parser.parse_args()

    owner, _, repo = args.repository.partition("/")
    if not repo:
        parser.error("repository must look like owner/repo")

    configure_logging(level=logging.INFO)
    try:
        sys.exit(asyncio.run(run(PullRequestRef(owner, repo, args.number), args.dry_run)))
    except MergeBotError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

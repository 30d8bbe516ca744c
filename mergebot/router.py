"""
Webhook event routing.

Maps a GitHub webhook delivery to the pull requests it may have unblocked and
runs the merge engine on each of them.
"""

from collections.abc import Callable
from typing import Any

from mergebot.config import ConfigLoader, MergeConfig
from mergebot.engine import MergeEngine
from mergebot.logging import get_logger
from mergebot.policy import MergeDecision
from mergebot.types.pulls import PullRequestRef

logger = get_logger("router")

# event -> actions that can change the merge decision
PULL_REQUEST_EVENTS: dict[str, frozenset[str]] = {
    "pull_request": frozenset({"opened", "reopened", "synchronize"}),
    "pull_request_review": frozenset({"submitted", "dismissed"}),
}
CHECK_EVENTS: dict[str, frozenset[str]] = {
    "check_run": frozenset({"created", "rerequested", "requested_action"}),
    "check_suite": frozenset({"completed", "requested", "rerequested"}),
}


def handles(event: str, action: str | None) -> bool:
    """Whether an event/action pair is one the bot reacts to."""
    actions = PULL_REQUEST_EVENTS.get(event) or CHECK_EVENTS.get(event)
    return actions is not None and action in actions


def resolve_targets(event: str, payload: dict[str, Any]) -> list[PullRequestRef]:
    """
    Pull requests affected by a webhook delivery.

    Pull request events name their pull request directly (identity from its
    base repository). Check events list the pull requests whose head matches
    the checked commit; those live in the delivery's repository.
    """
    action = payload.get("action")
    if not handles(event, action):
        return []

    if event in PULL_REQUEST_EVENTS:
        pull_request = payload["pull_request"]
        base_repo = pull_request["base"]["repo"]
        return [
            PullRequestRef(
                owner=base_repo["owner"]["login"],
                repo=base_repo["name"],
                number=pull_request["number"],
            )
        ]

    repository = payload["repository"]
    owner = repository["owner"]["login"]
    repo = repository["name"]
    check = payload[event]
    return [
        PullRequestRef(owner=owner, repo=repo, number=pr["number"])
        for pr in check.get("pull_requests") or []
    ]


class EventRouter:
    """Dispatches webhook deliveries to the merge engine."""

    def __init__(
        self,
        engine: MergeEngine,
        config_loader: ConfigLoader | Callable[[str, str], Any],
    ) -> None:
        self.engine = engine
        self._load_config = (
            config_loader.load if isinstance(config_loader, ConfigLoader) else config_loader
        )

    async def dispatch(self, event: str, payload: dict[str, Any]) -> list[MergeDecision]:
        """
        Evaluate every pull request targeted by a delivery, in order.

        The repository config is read once per delivery. Errors propagate; a
        failure on one pull request aborts the remaining ones.
        """
        targets = resolve_targets(event, payload)
        if not targets:
            logger.debug("Ignoring %s.%s", event, payload.get("action"))
            return []

        first = targets[0]
        config: MergeConfig = await self._load_config(first.owner, first.repo)

        decisions = []
        for ref in targets:
            decisions.append(await self.engine.evaluate(ref, config))
        return decisions

"""Async pull requests resource client."""

from typing import TYPE_CHECKING, Any

from mergebot.types.pulls import MergeResult, PullRequest

if TYPE_CHECKING:
    from mergebot.transport import AsyncHTTPTransport


class AsyncPullsClient:
    """Async client for pull request operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async pulls client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get(self, owner: str, repo: str, number: int) -> PullRequest:
        """
        Get a pull request.

        Args:
            owner: Repository owner login
            repo: Repository name
            number: Pull request number

        Returns:
            PullRequest with state, merged flag and mergeable status
        """
        data = await self.transport.request(
            method="GET",
            path=f"/repos/{owner}/{repo}/pulls/{number}",
        )
        return parse_pull_request(data)

    async def merge(
        self,
        owner: str,
        repo: str,
        number: int,
        merge_method: str = "merge",
    ) -> MergeResult:
        """
        Merge a pull request.

        Args:
            owner: Repository owner login
            repo: Repository name
            number: Pull request number
            merge_method: "merge", "squash", or "rebase" (default: "merge")

        Returns:
            MergeResult with the merge commit sha

        Raises:
            ConflictError: If GitHub refuses the merge (405 not mergeable,
                409 head modified)
        """
        data = await self.transport.request(
            method="PUT",
            path=f"/repos/{owner}/{repo}/pulls/{number}/merge",
            body={"merge_method": merge_method},
        )
        return MergeResult(
            sha=data.get("sha", ""),
            merged=data.get("merged", False),
            message=data.get("message", ""),
        )


def parse_pull_request(data: dict[str, Any]) -> PullRequest:
    """Parse pull request data from an API response or webhook payload.

    Identity comes from the base repository, which is where the pull request
    lives even when the head is a fork.
    """
    base = data["base"]
    base_repo = base["repo"]
    return PullRequest(
        owner=base_repo["owner"]["login"],
        repo=base_repo["name"],
        number=data["number"],
        head_sha=data["head"]["sha"],
        base_ref=base.get("ref", ""),
        state=data["state"],
        merged=data.get("merged", False),
        mergeable=data.get("mergeable"),
        title=data.get("title", ""),
    )

"""Async reviews resource client."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from mergebot.exceptions import ValidationError
from mergebot.types.pulls import Review, ReviewState

if TYPE_CHECKING:
    from mergebot.transport import AsyncHTTPTransport


class AsyncReviewsClient:
    """Async client for pull request review operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async reviews client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def list(self, owner: str, repo: str, number: int) -> list[Review]:
        """
        List every review submitted on a pull request, across all pages.

        Args:
            owner: Repository owner login
            repo: Repository name
            number: Pull request number

        Returns:
            List of Review objects in API order (oldest first)
        """
        reviews = await self.transport.paginate(
            f"/repos/{owner}/{repo}/pulls/{number}/reviews"
        )
        return [parse_review(review) for review in reviews]


def parse_review(data: dict[str, Any]) -> Review:
    """Parse a review from an API response."""
    submitted_at = None
    if data.get("submitted_at"):
        submitted_at = datetime.fromisoformat(data["submitted_at"].replace("Z", "+00:00"))

    try:
        state = ReviewState(data["state"])
    except ValueError as e:
        raise ValidationError("UNKNOWN_REVIEW_STATE", f"Unknown review state: {data['state']!r}") from e

    # Deleted accounts come back as a null user; keep each one a separate reviewer.
    user = data.get("user") or {}
    return Review(
        review_id=data["id"],
        user=user.get("login") or f"ghost-{data['id']}",
        state=state,
        submitted_at=submitted_at,
    )

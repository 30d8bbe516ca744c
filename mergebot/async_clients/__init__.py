"""mergebot async resource clients."""

from mergebot.async_clients.checks import AsyncChecksClient
from mergebot.async_clients.contents import AsyncContentsClient
from mergebot.async_clients.pulls import AsyncPullsClient
from mergebot.async_clients.reviews import AsyncReviewsClient

__all__ = [
    "AsyncPullsClient",
    "AsyncReviewsClient",
    "AsyncChecksClient",
    "AsyncContentsClient",
]

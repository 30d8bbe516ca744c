"""mergebot testing utilities.

Provides a mock GitHub client, factories and fixtures for testing the merge
engine without network access.
"""

from mergebot.testing.fixtures import (
    create_mock_check_run,
    create_mock_pull_request,
    create_mock_review,
)
from mergebot.testing.mock import MockCall, MockGitHubClient, MockResponse

__all__ = [
    # Mock client
    "MockGitHubClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_pull_request",
    "create_mock_review",
    "create_mock_check_run",
]

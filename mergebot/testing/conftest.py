"""
Pytest plugin exposing mergebot's testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["mergebot.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from mergebot.testing.fixtures import (
    mock_client,
    pr_ref,
    rsa_signer,
    sample_check_run,
    sample_pull_request,
    sample_review,
)

__all__ = [
    "mock_client",
    "pr_ref",
    "rsa_signer",
    "sample_check_run",
    "sample_pull_request",
    "sample_review",
]

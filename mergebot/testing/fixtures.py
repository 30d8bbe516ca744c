"""
Pytest fixtures and factories for testing code built on mergebot.
"""

from collections.abc import Generator
from datetime import datetime, timezone

import pytest

from mergebot.signers import RSASigner
from mergebot.testing.mock import MockGitHubClient
from mergebot.types.checks import CheckConclusion, CheckRun, CheckStatus
from mergebot.types.pulls import PullRequest, PullRequestRef, Review, ReviewState


# ============================================================================
# Factories
# ============================================================================


def create_mock_pull_request(
    owner: str = "octo-org",
    repo: str = "hello-world",
    number: int = 42,
    head_sha: str = "6dcb09b5b57875f334f61aebed695e2e4193db5e",
    state: str = "open",
    merged: bool = False,
    mergeable: bool | None = True,
    base_ref: str = "main",
    title: str = "Add new feature",
) -> PullRequest:
    """Create a PullRequest with sensible defaults for testing."""
    return PullRequest(
        owner=owner,
        repo=repo,
        number=number,
        head_sha=head_sha,
        base_ref=base_ref,
        state=state,
        merged=merged,
        mergeable=mergeable,
        title=title,
    )


def create_mock_review(
    user: str = "alice",
    state: ReviewState | str = ReviewState.APPROVED,
    submitted_at: datetime | None = None,
    review_id: int = 1,
) -> Review:
    """Create a Review with sensible defaults for testing."""
    if submitted_at is None:
        submitted_at = datetime(2024, 1, 15, 15, 0, 0, tzinfo=timezone.utc)
    return Review(
        review_id=review_id,
        user=user,
        state=ReviewState(state),
        submitted_at=submitted_at,
    )


def create_mock_check_run(
    name: str = "ci",
    status: CheckStatus | str = CheckStatus.COMPLETED,
    conclusion: CheckConclusion | str | None = CheckConclusion.SUCCESS,
    check_run_id: int = 1,
) -> CheckRun:
    """Create a CheckRun with sensible defaults for testing.

    The conclusion is dropped for runs that are not completed, as GitHub does.
    """
    status = CheckStatus(status)
    if status != CheckStatus.COMPLETED or conclusion is None:
        resolved = None
    else:
        resolved = CheckConclusion(conclusion)
    return CheckRun(
        check_run_id=check_run_id,
        name=name,
        status=status,
        conclusion=resolved,
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockGitHubClient, None, None]:
    """
    Provide a MockGitHubClient for testing.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.pulls.configure_get(response=create_mock_pull_request())
            ...
            assert mock_client.was_called("pulls.merge")
        ```
    """
    client = MockGitHubClient()
    yield client
    client.reset()


@pytest.fixture
def pr_ref() -> PullRequestRef:
    """Provide the identity of the default mock pull request."""
    return PullRequestRef("octo-org", "hello-world", 42)


@pytest.fixture
def sample_pull_request() -> PullRequest:
    """Provide an open, mergeable pull request."""
    return create_mock_pull_request()


@pytest.fixture
def sample_review() -> Review:
    """Provide an approving review."""
    return create_mock_review()


@pytest.fixture
def sample_check_run() -> CheckRun:
    """Provide a successful completed check run."""
    return create_mock_check_run()


@pytest.fixture(scope="session")
def rsa_signer() -> RSASigner:
    """Provide a generated RSA signer (generated once per session; keygen is slow)."""
    return RSASigner.generate()

"""mergebot - merges GitHub pull requests once reviews and checks allow it."""

from mergebot.aggregate import CheckAggregate, aggregate_checks, aggregate_reviews
from mergebot.async_client import AsyncGitHubClient
from mergebot.auth import AppJWTAuth, InstallationAuth, TokenAuth
from mergebot.config import ConfigLoader, MergeConfig, parse_config
from mergebot.engine import MergeEngine
from mergebot.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    MergeBotError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
    WebhookSignatureError,
)
from mergebot.logging import configure_logging, get_logger
from mergebot.policy import BLOCKING_CONCLUSIONS, MergeDecision, Outcome, evaluate
from mergebot.router import EventRouter, resolve_targets
from mergebot.scheduler import RecheckConfig, RecheckScheduler
from mergebot.signers import RSASigner, Signer
from mergebot.transport import AsyncHTTPTransport, RetryConfig
from mergebot.types import (
    CheckConclusion,
    CheckRun,
    CheckStatus,
    MergeResult,
    PullRequest,
    PullRequestRef,
    Review,
    ReviewState,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "MergeEngine",
    "EventRouter",
    "resolve_targets",
    "RecheckScheduler",
    "RecheckConfig",
    # Decision
    "evaluate",
    "MergeDecision",
    "Outcome",
    "BLOCKING_CONCLUSIONS",
    "aggregate_reviews",
    "aggregate_checks",
    "CheckAggregate",
    # Config
    "MergeConfig",
    "ConfigLoader",
    "parse_config",
    # Client
    "AsyncGitHubClient",
    "AsyncHTTPTransport",
    "RetryConfig",
    # Auth
    "TokenAuth",
    "AppJWTAuth",
    "InstallationAuth",
    "Signer",
    "RSASigner",
    # Types
    "PullRequestRef",
    "PullRequest",
    "Review",
    "ReviewState",
    "CheckRun",
    "CheckStatus",
    "CheckConclusion",
    "MergeResult",
    # Exceptions
    "MergeBotError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ConfigurationError",
    "WebhookSignatureError",
    # Logging
    "configure_logging",
    "get_logger",
]

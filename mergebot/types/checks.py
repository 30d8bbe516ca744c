"""Check run data models."""

from dataclasses import dataclass
from enum import Enum


class CheckStatus(str, Enum):
    """Lifecycle status of a check run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    WAITING = "waiting"
    REQUESTED = "requested"
    PENDING = "pending"


class CheckConclusion(str, Enum):
    """Terminal outcome of a completed check run."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"
    SKIPPED = "skipped"
    STALE = "stale"


@dataclass
class CheckRun:
    """A single named status check on a commit."""

    check_run_id: int
    name: str
    status: CheckStatus
    conclusion: CheckConclusion | None  # only set once status is completed

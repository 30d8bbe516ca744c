"""Async check runs resource client."""

from typing import TYPE_CHECKING, Any

from mergebot.exceptions import ValidationError
from mergebot.types.checks import CheckConclusion, CheckRun, CheckStatus

if TYPE_CHECKING:
    from mergebot.transport import AsyncHTTPTransport


class AsyncChecksClient:
    """Async client for check run operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def list_for_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        filter: str = "latest",
    ) -> list[CheckRun]:
        """
        List check runs for a commit sha, branch or tag.

        Args:
            owner: Repository owner login
            repo: Repository name
            ref: Commit sha, branch or tag name
            filter: "latest" keeps only the most recent run per check name;
                "all" returns every run

        Returns:
            List of CheckRun objects
        """
        check_runs = await self.transport.paginate(
            f"/repos/{owner}/{repo}/commits/{ref}/check-runs",
            params={"filter": filter},
            key="check_runs",
        )
        return [parse_check_run(check_run) for check_run in check_runs]


def parse_check_run(data: dict[str, Any]) -> CheckRun:
    """Parse a check run from an API response."""
    conclusion = data.get("conclusion")
    try:
        status = CheckStatus(data["status"])
    except ValueError as e:
        raise ValidationError("UNKNOWN_CHECK_STATUS", f"Unknown check status: {data['status']!r}") from e
    try:
        parsed_conclusion = CheckConclusion(conclusion) if conclusion else None
    except ValueError as e:
        raise ValidationError("UNKNOWN_CHECK_CONCLUSION", f"Unknown check conclusion: {conclusion!r}") from e

    return CheckRun(
        check_run_id=data["id"],
        name=data["name"],
        status=status,
        conclusion=parsed_conclusion,
    )

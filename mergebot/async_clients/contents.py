"""Async repository contents resource client."""

import base64
from typing import TYPE_CHECKING

from mergebot.exceptions import ValidationError

if TYPE_CHECKING:
    from mergebot.transport import AsyncHTTPTransport


class AsyncContentsClient:
    """Async client for reading repository files."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def get_text(
        self,
        owner: str,
        repo: str,
        path: str,
        ref: str | None = None,
    ) -> str:
        """
        Read a text file from a repository.

        Args:
            owner: Repository owner login
            repo: Repository name
            path: File path inside the repository
            ref: Branch, tag or sha (default: the default branch)

        Returns:
            Decoded file contents

        Raises:
            NotFoundError: If the file does not exist
            ValidationError: If the path is a directory or not base64 encoded
        """
        data = await self.transport.request(
            method="GET",
            path=f"/repos/{owner}/{repo}/contents/{path}",
            params={"ref": ref} if ref else None,
        )
        if not isinstance(data, dict) or data.get("type") != "file":
            raise ValidationError("NOT_A_FILE", f"{path} is not a file")
        if data.get("encoding") != "base64":
            raise ValidationError(
                "UNSUPPORTED_ENCODING", f"Unexpected encoding for {path}: {data.get('encoding')}"
            )
        return base64.b64decode(data["content"]).decode("utf-8")

"""
Authentication strategies for the GitHub REST API.

An Auth object supplies the Authorization header for every request attempt,
so short-lived credentials can be refreshed transparently.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Protocol

from mergebot.exceptions import AuthenticationError
from mergebot.signers import Signer
from mergebot.signing import build_app_claims, encode_jwt
from mergebot.transport import DEFAULT_BASE_URL, AsyncHTTPTransport

# Refresh installation tokens this long before GitHub expires them.
TOKEN_REFRESH_MARGIN = timedelta(minutes=1)


class Auth(Protocol):
    async def headers(self) -> dict[str, str]:
        ...


class TokenAuth:
    """Static token (personal access token or Actions GITHUB_TOKEN)."""

    def __init__(self, token: str) -> None:
        self._token = token

    async def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}


class AppJWTAuth:
    """Authenticates as the GitHub App itself with a freshly signed JWT."""

    def __init__(self, app_id: str | int, signer: Signer) -> None:
        self.app_id = str(app_id)
        self.signer = signer

    def create_jwt(self, now: datetime | None = None) -> str:
        return encode_jwt(build_app_claims(self.app_id, now), self.signer)

    async def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.create_jwt()}"}


class InstallationAuth:
    """
    Authenticates as one installation of a GitHub App.

    Exchanges the app JWT for an installation access token and caches it in
    memory until shortly before it expires. The cache lives only as long as the
    process.
    """

    def __init__(
        self,
        app_id: str | int,
        signer: Signer,
        installation_id: int,
        base_url: str = DEFAULT_BASE_URL,
        transport: AsyncHTTPTransport | None = None,
    ) -> None:
        self.installation_id = installation_id
        self._transport = transport or AsyncHTTPTransport(
            auth=AppJWTAuth(app_id, signer), base_url=base_url
        )
        self._token: str | None = None
        self._expires_at: datetime | None = None
        self._lock = asyncio.Lock()

    async def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {await self.token()}"}

    async def token(self) -> str:
        async with self._lock:
            if self._token is None or self._is_expiring():
                await self._refresh()
            assert self._token is not None
            return self._token

    def _is_expiring(self) -> bool:
        if self._expires_at is None:
            return True
        return datetime.now(timezone.utc) >= self._expires_at - TOKEN_REFRESH_MARGIN

    async def _refresh(self) -> None:
        data = await self._transport.request(
            "POST", f"/app/installations/{self.installation_id}/access_tokens"
        )
        if not data or "token" not in data:
            raise AuthenticationError(
                "NO_INSTALLATION_TOKEN",
                f"GitHub returned no token for installation {self.installation_id}",
            )
        self._token = data["token"]
        self._expires_at = _parse_timestamp(data.get("expires_at"))

    async def close(self) -> None:
        await self._transport.close()


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))

"""
mergebot async GitHub client.

Aggregates the async resource clients the merge engine needs behind one
authenticated transport.
"""

import os
from typing import Any

from mergebot.async_clients import (
    AsyncChecksClient,
    AsyncContentsClient,
    AsyncPullsClient,
    AsyncReviewsClient,
)
from mergebot.auth import Auth, InstallationAuth, TokenAuth
from mergebot.exceptions import ConfigurationError
from mergebot.signers import RSASigner
from mergebot.transport import DEFAULT_BASE_URL, AsyncHTTPTransport, RetryConfig


class AsyncGitHubClient:
    """
    Async client for the parts of the GitHub REST API used by mergebot.

    Example:
        ```python
        import asyncio
        from mergebot import AsyncGitHubClient, TokenAuth

        async def main():
            async with AsyncGitHubClient(auth=TokenAuth("ghp_...")) as client:
                pr = await client.pulls.get("octo", "hello", 42)
                print(pr.mergeable)

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = DEFAULT_BASE_URL
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        auth: Auth | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the async GitHub client.

        Args:
            auth: Supplies Authorization headers (TokenAuth, InstallationAuth, ...)
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
        """
        self.auth = auth
        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            auth=auth,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )

        self.pulls = AsyncPullsClient(self._transport)
        self.reviews = AsyncReviewsClient(self._transport)
        self.checks = AsyncChecksClient(self._transport)
        self.contents = AsyncContentsClient(self._transport)

    @classmethod
    def from_env(
        cls,
        installation_id: int | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "AsyncGitHubClient":
        """
        Create an async client from environment variables.

        Environment variables:
            GITHUB_TOKEN: Static token (used when set)
            GITHUB_APP_ID: GitHub App id (used with an installation id)
            GITHUB_PRIVATE_KEY_PATH: Path to the App's PEM private key
            GITHUB_API_URL: Base URL for API (optional, default: https://api.github.com)

        Args:
            installation_id: Installation to act as when authenticating as an App
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)

        Raises:
            ConfigurationError: If no usable credentials are configured
        """
        base_url = os.environ.get("GITHUB_API_URL", cls.DEFAULT_BASE_URL)
        token = os.environ.get("GITHUB_TOKEN")
        app_id = os.environ.get("GITHUB_APP_ID")
        key_path = os.environ.get("GITHUB_PRIVATE_KEY_PATH")

        auth: Auth
        if token:
            auth = TokenAuth(token)
        elif app_id and key_path:
            if installation_id is None:
                raise ConfigurationError(
                    "An installation id is required to authenticate as GitHub App "
                    f"{app_id}"
                )
            auth = InstallationAuth(
                app_id=app_id,
                signer=RSASigner.from_pem_file(key_path),
                installation_id=installation_id,
                base_url=base_url,
            )
        else:
            raise ConfigurationError(
                "Set GITHUB_TOKEN, or GITHUB_APP_ID and GITHUB_PRIVATE_KEY_PATH"
            )

        return cls(auth=auth, base_url=base_url, timeout=timeout, retry_config=retry_config)

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()
        if isinstance(self.auth, InstallationAuth):
            await self.auth.close()

    async def __aenter__(self) -> "AsyncGitHubClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()

"""mergebot exception classes."""


class MergeBotError(Exception):
    """Base exception for all mergebot errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(MergeBotError):
    """Raised when process settings or a repository config file are invalid."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class WebhookSignatureError(MergeBotError):
    """Raised when a webhook delivery fails signature verification."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_SIGNATURE", message)


class AuthenticationError(MergeBotError):
    """Raised when GitHub rejects the credentials (401)."""

    pass


class AuthorizationError(MergeBotError):
    """Raised when access is denied (403)."""

    pass


class NotFoundError(MergeBotError):
    """Raised when a resource is not found."""

    pass


class ConflictError(MergeBotError):
    """Raised when GitHub refuses a state change (already merged, head moved, etc.)."""

    pass


class RateLimitedError(MergeBotError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(MergeBotError):
    """Raised on validation errors."""

    pass


class ServerError(MergeBotError):
    """Raised on server errors (5xx) and exhausted network retries."""

    pass

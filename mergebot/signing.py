"""
Signature helpers for mergebot.

Two unrelated signatures live here: the RS256 JWT a GitHub App presents to
obtain installation tokens, and the HMAC-SHA256 digest GitHub attaches to
webhook deliveries.
"""

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from mergebot.exceptions import WebhookSignatureError
from mergebot.signers import Signer

# GitHub rejects app JWTs valid for more than 10 minutes; leave room for clock drift.
JWT_LIFETIME = timedelta(minutes=9)
JWT_CLOCK_SKEW = timedelta(seconds=60)

SIGNATURE_PREFIX = "sha256="


@dataclass
class AppClaims:
    """Claims of a GitHub App JWT."""

    issuer: str
    issued_at: datetime
    expires_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
            "iss": self.issuer,
        }


def build_app_claims(app_id: str | int, now: datetime | None = None) -> AppClaims:
    """
    Build JWT claims for a GitHub App.

    ``iat`` is backdated by a minute to tolerate clock drift between this host
    and GitHub.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return AppClaims(
        issuer=str(app_id),
        issued_at=now - JWT_CLOCK_SKEW,
        expires_at=now + JWT_LIFETIME,
    )


def encode_jwt(claims: AppClaims, signer: Signer) -> str:
    """
    Encode and sign a compact JWT.

    Args:
        claims: The claims to sign
        signer: Holds the private key and its algorithm (RS256)

    Returns:
        Compact JWT string
    """
    return jwt.encode(claims.to_dict(), signer.signing_key, algorithm=signer.algorithm)


def compute_webhook_signature(secret: str, body: bytes) -> str:
    """Compute the ``X-Hub-Signature-256`` header value for a payload."""
    digest = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_webhook_signature(secret: str, body: bytes, signature: str | None) -> None:
    """
    Verify a webhook delivery against the shared secret.

    Raises:
        WebhookSignatureError: If the header is missing, malformed or does not match
    """
    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        raise WebhookSignatureError("Missing or malformed X-Hub-Signature-256 header")

    expected = compute_webhook_signature(secret, body)
    if not hmac.compare_digest(expected, signature):
        raise WebhookSignatureError("Webhook signature mismatch")

# core/clerk_verifier.py

"""
Clerk session-token verification.

Clerk issues short-lived RS256 JWTs (the `__session` cookie, or a bearer
token from `getToken()` on the frontend). They are verified against the
instance's JWKS document:

    <CLERK_ISSUER_URL>/.well-known/jwks.json

Claims used downstream:
    sub  → Clerk user id (external identity)
    sid  → Clerk session id
"""

import time
from threading import Lock
from typing import Any, Dict, Optional

import requests
from jose import jwt, JWTError, ExpiredSignatureError

from core.config import settings
from core.logging_config import get_logger

log = get_logger("clerk")


class ClerkVerificationError(Exception):
    """Raised when a Clerk token cannot be verified."""

    def __init__(self, message: str, error_code: str = "verification_failed"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ClerkJWTVerifier:
    """
    Verifies Clerk-issued JWTs against the instance JWKS.

    The JWKS document is held in memory for JWKS_CACHE_SECONDS and
    re-fetched once when a token carries an unknown `kid` (key rotation).
    """

    ALGORITHMS = ["RS256"]

    # Tolerance for exp / nbf / iat
    CLOCK_SKEW_SECONDS = 60

    def __init__(
        self,
        issuer: Optional[str] = None,
        jwks_url: Optional[str] = None,
        audience: Optional[str] = None,
        cache_seconds: Optional[int] = None,
    ):
        self.issuer = (issuer or settings.CLERK_ISSUER_URL or "").rstrip("/")
        if not self.issuer:
            raise ClerkVerificationError(
                "CLERK_ISSUER_URL is not configured",
                error_code="config_error",
            )

        self.jwks_url = jwks_url or settings.CLERK_JWKS_URL or f"{self.issuer}/.well-known/jwks.json"
        self.audience = audience or settings.CLERK_AUDIENCE
        self.cache_seconds = cache_seconds or settings.JWKS_CACHE_SECONDS

        self._jwks: Optional[Dict[str, Any]] = None
        self._jwks_expires_at: float = 0
        self._lock = Lock()

    # ---------------------------------------------------------
    # JWKS
    # ---------------------------------------------------------
    def _fetch_jwks(self) -> Dict[str, Any]:
        try:
            resp = requests.get(self.jwks_url, timeout=5)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            log.error(f"Failed to fetch Clerk JWKS from {self.jwks_url}: {e}")
            raise ClerkVerificationError(f"Failed to fetch JWKS: {e}", error_code="jwks_fetch_error")

    def _get_jwks(self, force_refresh: bool = False) -> Dict[str, Any]:
        with self._lock:
            now = time.time()
            if force_refresh or self._jwks is None or now >= self._jwks_expires_at:
                self._jwks = self._fetch_jwks()
                self._jwks_expires_at = now + self.cache_seconds
                log.debug("Refreshed Clerk JWKS")
            return self._jwks

    def _signing_key(self, kid: Optional[str]) -> Dict[str, Any]:
        for refresh in (False, True):
            for key in self._get_jwks(force_refresh=refresh).get("keys", []):
                if kid is None or key.get("kid") == kid:
                    return key

        raise ClerkVerificationError(f"No signing key for kid={kid}", error_code="unknown_kid")

    # ---------------------------------------------------------
    # Verification
    # ---------------------------------------------------------
    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature, issuer, expiry (and audience when configured).
        Returns the token claims.
        """
        if not token:
            raise ClerkVerificationError("Token is required", error_code="missing_token")

        if token.startswith("Bearer "):
            token = token[7:]

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise ClerkVerificationError(f"Malformed token: {e}", error_code="malformed_token")

        key = self._signing_key(header.get("kid"))

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=self.ALGORITHMS,
                issuer=self.issuer,
                audience=self.audience,
                options={
                    "verify_aud": bool(self.audience),
                    "leeway": self.CLOCK_SKEW_SECONDS,
                },
            )
        except ExpiredSignatureError:
            raise ClerkVerificationError("Token has expired", error_code="token_expired")
        except JWTError as e:
            raise ClerkVerificationError(f"Invalid token: {e}", error_code="invalid_token")

        if not claims.get("sub"):
            raise ClerkVerificationError("Token has no subject", error_code="missing_sub")

        return claims


# ============================================================
# Process-wide verifier
# ============================================================
_verifier: Optional[ClerkJWTVerifier] = None
_verifier_lock = Lock()


def get_verifier() -> ClerkJWTVerifier:
    global _verifier
    with _verifier_lock:
        if _verifier is None:
            _verifier = ClerkJWTVerifier()
        return _verifier


def reset_verifier():
    """Drop the cached verifier (settings changed, tests)."""
    global _verifier
    with _verifier_lock:
        _verifier = None

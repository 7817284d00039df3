"""Cognito bearer-token verification.

The verifier is built once from configuration (see ``container.Container``) and
shared across requests. Signing keys are fetched from the user pool's JWKS
endpoint by ``jwt.PyJWKClient``, which caches them.
"""
import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import jwt

logger = logging.getLogger(__name__)

GROUPS_CLAIM = "cognito:groups"
ADMIN_GROUP = "admin"
MISSING_CONFIG_ERROR = "Auth configuration missing"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity derived from a verified token. Never persisted."""

    subject_id: str
    email: str
    role: Role
    groups: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of verifying a request's bearer token.

    - no token: ``authenticated=False, user=None, error=None``
    - misconfigured verifier or invalid token: ``authenticated=False`` with ``error``
    - valid token: ``authenticated=True`` with ``user``
    """

    authenticated: bool
    user: AuthenticatedUser | None = None
    error: str | None = None


class SigningKeyResolver(Protocol):
    """Anything that resolves the signing key for a JWT (``jwt.PyJWKClient`` does)."""

    def get_signing_key_from_jwt(self, token: str) -> Any: ...


def extract_bearer_token(headers: Mapping[str, str]) -> str | None:
    """Return the token from ``Authorization: Bearer <token>``.

    The scheme is case-sensitive and the value must split into exactly two
    whitespace-separated parts; anything else counts as no token.
    """
    value = headers.get("authorization") or headers.get("Authorization")
    if not value:
        return None
    parts = value.split()
    if len(parts) != 2 or parts[0] != "Bearer":
        return None
    return parts[1]


def derive_role(groups: Iterable[str]) -> Role:
    """Admin if the user belongs to the admin group, otherwise a plain user."""
    return Role.ADMIN if ADMIN_GROUP in set(groups) else Role.USER


def _groups_from_claims(claims: Mapping[str, Any]) -> frozenset[str]:
    raw = claims.get(GROUPS_CLAIM)
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        return frozenset({raw})
    return frozenset(str(g) for g in raw)


def user_from_claims(claims: Mapping[str, Any]) -> AuthenticatedUser:
    """Build the request identity; email falls back to the username claim."""
    groups = _groups_from_claims(claims)
    return AuthenticatedUser(
        subject_id=str(claims["sub"]),
        email=str(claims.get("email") or claims.get("username") or ""),
        role=derive_role(groups),
        groups=groups,
    )


class TokenVerifier:
    """Verifies Cognito-issued JWTs and derives the authenticated user."""

    def __init__(
        self,
        user_pool_id: str | None,
        client_id: str | None,
        *,
        region: str | None = None,
        token_use: str = "access",
        key_resolver: SigningKeyResolver | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            user_pool_id: Cognito user pool id, e.g. "ap-northeast-1_AbCdEf".
            client_id: App client id the tokens must be issued for.
            region: Pool region; derived from the pool id prefix when omitted.
            token_use: "access" or "id".
            key_resolver: Signing key source; defaults to the pool's JWKS endpoint.
        """
        self._user_pool_id = user_pool_id or ""
        self._client_id = client_id or ""
        self._token_use = token_use
        self._key_resolver: SigningKeyResolver | None = None
        self._issuer = ""
        if self.configured:
            pool_region = region or self._user_pool_id.split("_", 1)[0]
            self._issuer = f"https://cognito-idp.{pool_region}.amazonaws.com/{self._user_pool_id}"
            self._key_resolver = key_resolver or jwt.PyJWKClient(
                f"{self._issuer}/.well-known/jwks.json"
            )

    @property
    def configured(self) -> bool:
        return bool(self._user_pool_id and self._client_id)

    @property
    def issuer(self) -> str:
        return self._issuer

    async def verify(self, headers: Mapping[str, str]) -> AuthResult:
        """Verify the request's bearer token, if any."""
        token = extract_bearer_token(headers)
        if token is None:
            return AuthResult(authenticated=False)
        if not self.configured:
            logger.error("Token received but Cognito pool/client configuration is missing")
            return AuthResult(authenticated=False, error=MISSING_CONFIG_ERROR)
        try:
            claims = await asyncio.to_thread(self._decode, token)
            user = user_from_claims(claims)
        except Exception as exc:  # pylint: disable=broad-except
            logger.info("Token verification failed: %s", exc)
            return AuthResult(
                authenticated=False,
                error=str(exc) or "Token verification failed",
            )
        return AuthResult(authenticated=True, user=user)

    def _decode(self, token: str) -> dict[str, Any]:
        """Validate signature, expiry, issuer, token use and client (runs in a thread)."""
        signing_key = self._key_resolver.get_signing_key_from_jwt(token)
        decode_kwargs: dict[str, Any] = {
            "algorithms": ["RS256"],
            "issuer": self._issuer,
            "options": {"require": ["exp", "sub"]},
        }
        if self._token_use == "id":
            decode_kwargs["audience"] = self._client_id
        else:
            # Access tokens carry client_id instead of aud.
            decode_kwargs["options"]["verify_aud"] = False
        claims = jwt.decode(token, getattr(signing_key, "key", signing_key), **decode_kwargs)

        if claims.get("token_use") != self._token_use:
            raise jwt.InvalidTokenError(
                f"Token use not allowed: {claims.get('token_use')}. Expected: {self._token_use}"
            )
        if self._token_use == "access" and claims.get("client_id") != self._client_id:
            raise jwt.InvalidTokenError(
                f"Client id not allowed: {claims.get('client_id')}. Expected: {self._client_id}"
            )
        return claims

import time
from types import SimpleNamespace

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from tech_trends.auth import (AuthenticatedUser, AuthResult, Role, TokenVerifier,
                              derive_role, extract_bearer_token, require_admin,
                              require_auth)
from tech_trends.auth.verifier import MISSING_CONFIG_ERROR, user_from_claims

POOL_ID = "ap-northeast-1_Test"
CLIENT_ID = "client-123"
ISSUER = f"https://cognito-idp.ap-northeast-1.amazonaws.com/{POOL_ID}"


@pytest.fixture(scope="module")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


class StaticKeyResolver:
    def __init__(self, public_key):
        self.public_key = public_key

    def get_signing_key_from_jwt(self, token):
        return SimpleNamespace(key=self.public_key)


@pytest.fixture
def verifier(signing_key):
    return TokenVerifier(POOL_ID, CLIENT_ID, key_resolver=StaticKeyResolver(signing_key.public_key()))


def make_token(private_key, **overrides):
    claims = {
        "sub": "user-1",
        "iss": ISSUER,
        "exp": int(time.time()) + 3600,
        "token_use": "access",
        "client_id": CLIENT_ID,
        "username": "user-1-name",
    }
    claims.update(overrides)
    claims = {k: v for k, v in claims.items() if v is not None}
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": "test"})


def bearer(token):
    return {"authorization": f"Bearer {token}"}


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Bearer abc", "abc"),
        ("Bearer   abc", "abc"),
        ("bearer abc", None),
        ("Bearer", None),
        ("Bearer a b", None),
        ("Token abc", None),
        ("", None),
    ],
)
def test_extract_bearer_token(value, expected):
    assert extract_bearer_token({"authorization": value}) == expected


def test_extract_bearer_token_without_header():
    assert extract_bearer_token({}) is None


def test_derive_role():
    assert derive_role(["admin", "beta"]) is Role.ADMIN
    assert derive_role(["beta"]) is Role.USER
    assert derive_role([]) is Role.USER


def test_user_from_claims_falls_back_to_username():
    user = user_from_claims({"sub": "s1", "username": "alice", "cognito:groups": "admin"})
    assert user.email == "alice"
    assert user.role is Role.ADMIN
    assert user.groups == frozenset({"admin"})


def test_gate_predicates():
    user = AuthenticatedUser(subject_id="s1", email="e", role=Role.USER)
    admin = AuthenticatedUser(subject_id="s2", email="e", role=Role.ADMIN)
    assert not require_auth(AuthResult(authenticated=False))
    assert not require_auth(AuthResult(authenticated=True, user=None))
    assert require_auth(AuthResult(authenticated=True, user=user))
    assert not require_admin(AuthResult(authenticated=True, user=user))
    assert require_admin(AuthResult(authenticated=True, user=admin))
    assert not require_admin(AuthResult(authenticated=False, user=admin))


async def test_no_token_is_unauthenticated_without_error(verifier):
    result = await verifier.verify({})
    assert result == AuthResult(authenticated=False)


async def test_valid_access_token(verifier, signing_key):
    token = make_token(signing_key, **{"cognito:groups": ["admin"], "email": "a@example.com"})
    result = await verifier.verify(bearer(token))
    assert result.authenticated
    assert result.user.subject_id == "user-1"
    assert result.user.email == "a@example.com"
    assert result.user.role is Role.ADMIN


async def test_plain_user_role(verifier, signing_key):
    result = await verifier.verify(bearer(make_token(signing_key)))
    assert result.user.role is Role.USER
    assert result.user.email == "user-1-name"
    assert result.user.groups == frozenset()


async def test_expired_token(verifier, signing_key):
    token = make_token(signing_key, exp=int(time.time()) - 60)
    result = await verifier.verify(bearer(token))
    assert not result.authenticated
    assert result.user is None
    assert result.error


async def test_wrong_signing_key(verifier):
    other = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    result = await verifier.verify(bearer(make_token(other)))
    assert not result.authenticated
    assert result.error


async def test_wrong_issuer(verifier, signing_key):
    token = make_token(signing_key, iss="https://cognito-idp.us-east-1.amazonaws.com/other")
    result = await verifier.verify(bearer(token))
    assert not result.authenticated


async def test_wrong_client_id(verifier, signing_key):
    result = await verifier.verify(bearer(make_token(signing_key, client_id="someone-else")))
    assert not result.authenticated
    assert "Client id not allowed" in result.error


async def test_id_token_rejected_by_access_verifier(verifier, signing_key):
    result = await verifier.verify(bearer(make_token(signing_key, token_use="id")))
    assert not result.authenticated
    assert "Token use not allowed" in result.error


async def test_id_token_verifier_checks_audience(signing_key):
    verifier = TokenVerifier(
        POOL_ID,
        CLIENT_ID,
        token_use="id",
        key_resolver=StaticKeyResolver(signing_key.public_key()),
    )
    good = make_token(signing_key, token_use="id", aud=CLIENT_ID, client_id=None, email="x@example.com")
    bad = make_token(signing_key, token_use="id", aud="other", client_id=None)

    assert (await verifier.verify(bearer(good))).user.email == "x@example.com"
    assert not (await verifier.verify(bearer(bad))).authenticated


async def test_missing_configuration(signing_key):
    verifier = TokenVerifier("", "")
    assert not verifier.configured
    result = await verifier.verify(bearer(make_token(signing_key)))
    assert result == AuthResult(authenticated=False, error=MISSING_CONFIG_ERROR)


def test_issuer_derived_from_pool_id(verifier):
    assert verifier.issuer == ISSUER

"""Bearer-token verification and authorization predicates."""
from tech_trends.auth.gate import require_admin, require_auth
from tech_trends.auth.verifier import (AuthenticatedUser, AuthResult, Role,
                                       TokenVerifier, derive_role,
                                       extract_bearer_token)

__all__ = [
    "AuthResult",
    "AuthenticatedUser",
    "Role",
    "TokenVerifier",
    "derive_role",
    "extract_bearer_token",
    "require_admin",
    "require_auth",
]

"""Authorization predicates over a token verification result."""
from tech_trends.auth.verifier import AuthResult, Role


def require_auth(result: AuthResult) -> bool:
    """True iff the request carried a valid token and a user was derived from it."""
    return result.authenticated and result.user is not None


def require_admin(result: AuthResult) -> bool:
    """True iff the request is authenticated and the user holds the admin role."""
    return require_auth(result) and result.user.role is Role.ADMIN

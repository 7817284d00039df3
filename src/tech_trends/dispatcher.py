"""Request dispatch: ordered route tables behind the authorization gate.

Dispatch order, first terminal branch wins:

1. ``OPTIONS`` -> empty success (CORS preflight)
2. ``GET``/``HEAD /health`` -> liveness
3. verify the bearer token (if any)
4. public routes
5. anything else requires authentication -> 401 with the verifier's message
6. user routes
7. ``/api/admin/...`` requires the admin role -> 403, then admin routes
8. a known path under another method -> 405; otherwise 404 naming the path

The router holds no per-request state; the verifier and route groups are
injected once at startup.
"""
import logging
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from tech_trends.auth import AuthenticatedUser, AuthResult, require_admin, require_auth
from tech_trends.errors import ApiError
from tech_trends.messages import ApiRequest, ApiResponse
from tech_trends.responses import (error, forbidden, method_not_allowed,
                                   not_found, server_error, success,
                                   unauthorized)

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"
ADMIN_PREFIX = "/api/admin"

# Path parameters are restricted to alphanumeric-and-hyphen identifiers.
_PARAM = re.compile(r"\{(\w+)\}")
_PARAM_PATTERN = r"(?P<\1>[A-Za-z0-9-]+)"


class Access(str, Enum):
    PUBLIC = "public"
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class RequestContext:
    """Per-request values handed to a handler."""

    params: Mapping[str, str] = field(default_factory=dict)
    user: AuthenticatedUser | None = None


Handler = Callable[[ApiRequest, RequestContext], Awaitable[ApiResponse]]


@dataclass(frozen=True)
class Route:
    method: str
    template: str
    access: Access
    handler: Handler
    pattern: re.Pattern[str]

    def match(self, path: str) -> dict[str, str] | None:
        m = self.pattern.fullmatch(path)
        return m.groupdict() if m else None


def route(method: str, template: str, access: Access, handler: Handler) -> Route:
    """Build a route from a template such as ``/api/trends/{id}``."""
    pattern = re.compile(_PARAM.sub(_PARAM_PATTERN, template))
    return Route(method=method.upper(), template=template, access=access, handler=handler, pattern=pattern)


class Verifier(Protocol):
    async def verify(self, headers: Mapping[str, str]) -> AuthResult: ...


class RouteGroup(Protocol):
    def routes(self) -> list[Route]: ...


def is_admin_path(path: str) -> bool:
    return path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/")


class Router:
    """Matches method + path against the route tables and invokes the handler."""

    def __init__(self, verifier: Verifier, groups: Iterable[RouteGroup]) -> None:
        self._verifier = verifier
        self._routes: list[Route] = [r for group in groups for r in group.routes()]

    async def dispatch(self, request: ApiRequest) -> ApiResponse:
        try:
            return await self._dispatch(request)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unhandled error for %s %s", request.method, request.path)
            return server_error()

    async def _dispatch(self, request: ApiRequest) -> ApiResponse:
        method, path = request.method, request.path
        logger.debug("%s %s", method, path)

        if method == "OPTIONS":
            return success({})
        if method in ("GET", "HEAD") and path == HEALTH_PATH:
            return success({"status": "ok"})

        auth = await self._verifier.verify(request.headers)

        response = await self._try_table(Access.PUBLIC, request, None)
        if response is not None:
            return response

        if not require_auth(auth):
            return unauthorized(auth.error or "Unauthorized")

        response = await self._try_table(Access.USER, request, auth.user)
        if response is not None:
            return response

        if is_admin_path(path):
            if not require_admin(auth):
                return forbidden("Admin access required")
            response = await self._try_table(Access.ADMIN, request, auth.user)
            if response is not None:
                return response

        if any(r.match(path) is not None for r in self._routes):
            return method_not_allowed(f"Method {method} not allowed for {path}")
        return not_found(f"Not found: {path}")

    async def _try_table(
        self,
        access: Access,
        request: ApiRequest,
        user: AuthenticatedUser | None,
    ) -> ApiResponse | None:
        for r in self._routes:
            if r.access is not access or r.method != request.method:
                continue
            params = r.match(request.path)
            if params is None:
                continue
            try:
                return await r.handler(request, RequestContext(params=params, user=user))
            except ApiError as exc:
                return error(exc.message, exc.status_code, exc.details)
        return None

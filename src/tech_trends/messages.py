"""Framework-neutral request/response objects passed through the dispatcher.

Both runtime surfaces (the FastAPI app and the Lambda adapter) translate their
native request into an ``ApiRequest`` and render the resulting ``ApiResponse``.
"""
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ApiRequest:
    """An inbound HTTP request. Header names are stored lower-cased.

    ``body`` stays undecoded bytes when the transport delivers bytes; JSON
    parsing decodes it strictly.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    body: str | bytes | None = None

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, str] | None = None,
        body: str | bytes | None = None,
    ) -> "ApiRequest":
        """Normalize method case and header names."""
        return cls(
            method=method.upper(),
            path=path or "/",
            headers={k.lower(): v for k, v in (headers or {}).items()},
            query=dict(query or {}),
            body=body,
        )


@dataclass(frozen=True)
class ApiResponse:
    """An outbound HTTP response with a JSON-compatible body."""

    status_code: int
    body: Any
    headers: Mapping[str, str] = field(default_factory=dict)

    def body_text(self) -> str:
        return json.dumps(self.body, ensure_ascii=False)


"""AWS Lambda entry point for API Gateway HTTP API events (payload 2.0, 1.0 fallback)."""
import asyncio
import base64
import logging
from typing import Any

from tech_trends.container import configure_logging, init_container
from tech_trends.messages import ApiRequest, ApiResponse

logger = logging.getLogger(__name__)

# Built once per execution environment and reused across invocations.
_container = init_container()
configure_logging(_container)


def request_from_event(event: dict[str, Any]) -> ApiRequest:
    """Translate an API Gateway proxy event into an ApiRequest."""
    http = event.get("requestContext", {}).get("http", {})
    method = http.get("method") or event.get("httpMethod") or "GET"
    path = event.get("rawPath") or http.get("path") or event.get("path") or "/"

    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        body = base64.b64decode(body)

    return ApiRequest.build(
        method=method,
        path=path,
        headers=event.get("headers") or {},
        query=event.get("queryStringParameters") or {},
        body=body,
    )


def to_lambda_result(response: ApiResponse) -> dict[str, Any]:
    return {
        "statusCode": response.status_code,
        "headers": dict(response.headers),
        "body": response.body_text(),
    }


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    request = request_from_event(event)
    response = asyncio.run(_container.router().dispatch(request))
    logger.info("%s %s -> %s", request.method, request.path, response.status_code)
    return to_lambda_result(response)

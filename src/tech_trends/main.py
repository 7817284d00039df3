"""ASGI entry point: every request is handed to the dispatcher."""
import logging

import uvicorn
from fastapi import FastAPI, Request, Response

from tech_trends import __version__
from tech_trends.container import Container, configure_logging, init_container
from tech_trends.deps import RouterDep
from tech_trends.messages import ApiRequest, ApiResponse

logger = logging.getLogger(__name__)

METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


async def to_api_request(request: Request) -> ApiRequest:
    raw_body = await request.body()
    return ApiRequest.build(
        method=request.method,
        path=request.url.path,
        headers=dict(request.headers.items()),
        query=dict(request.query_params),
        body=raw_body or None,
    )


def to_response(api_response: ApiResponse) -> Response:
    return Response(
        content=api_response.body_text(),
        status_code=api_response.status_code,
        headers=dict(api_response.headers),
    )


def create_app(container: Container | None = None) -> FastAPI:
    """Build the app around a container (a fresh one from the environment by default)."""
    fastapi_app = FastAPI(
        title="Tech Trends API",
        description="Technology trend catalog, favorites and user settings",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    fastapi_app.state.container = container or init_container()

    # Routing, auth and CORS are owned by the dispatcher, not FastAPI path matching.
    @fastapi_app.api_route("/{path:path}", methods=METHODS, include_in_schema=False)
    async def dispatch(request: Request, router: RouterDep) -> Response:
        api_response = await router.dispatch(await to_api_request(request))
        return to_response(api_response)

    return fastapi_app


app = create_app()


def run() -> None:
    """Run the server (uvicorn). Use for `poetry run start`."""
    configure_logging(app.state.container)
    logger.info("Starting Tech Trends API on http://127.0.0.1:8000")
    uvicorn.run("tech_trends.main:app", host="127.0.0.1", port=8000)

"""FastAPI dependencies: app.state holds the container; Depends() resolves from it."""
from typing import Annotated

from fastapi import Depends, Request

from tech_trends.dispatcher import Router


def get_router(request: Request) -> Router:
    """Resolve the dispatcher built by the container at startup."""
    return request.app.state.container.router()


RouterDep = Annotated[Router, Depends(get_router)]

"""Shared dependencies for API routes."""
from fastapi import Request
from fastapi.responses import JSONResponse

from healthhub.services import APIResponse, HealthAPI

STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "INVALID_TRANSITION": 409,
}


def get_api(request: Request) -> HealthAPI:
    """Dependency: the facade built during application startup."""
    return request.app.state.health_api


def respond(envelope: APIResponse, created: bool = False) -> JSONResponse:
    """Render an envelope, choosing the status from its error code."""
    if envelope.success:
        status_code = 201 if created else 200
    else:
        status_code = STATUS_BY_CODE.get(envelope.code, 500)
    return JSONResponse(status_code=status_code, content=envelope.to_dict())

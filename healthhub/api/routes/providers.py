"""Provider endpoints."""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from healthhub.api.deps import get_api, respond
from healthhub.services import HealthAPI

router = APIRouter(prefix="/providers", tags=["providers"])


@router.get("/")
async def list_providers(api: HealthAPI = Depends(get_api)):
    return respond(api.get_all_providers())


@router.get("/available")
async def list_available_providers(specialty: Optional[str] = None, api: HealthAPI = Depends(get_api)):
    """Active providers accepting new patients, optionally by specialty."""
    return respond(api.get_available_providers(specialty))


@router.post("/")
async def create_provider(data: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(api.create_provider(data), created=True)


@router.get("/{provider_id}")
async def get_provider(provider_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_provider(provider_id))


@router.get("/{provider_id}/appointments")
async def get_provider_appointments(provider_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_provider_appointments(provider_id))

"""Generative health assistant endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from healthhub.api.deps import get_api, respond
from healthhub.api.schemas import ChatRequest, SymptomRequest
from healthhub.services import HealthAPI

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/chat")
async def chat(body: ChatRequest, api: HealthAPI = Depends(get_api)):
    return respond(await api.assistant_chat(body.message, body.context))


@router.post("/health-data")
async def analyze_health_data(health_data: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(await api.assistant_analyze_health_data(health_data))


@router.post("/symptoms")
async def analyze_symptoms(body: SymptomRequest, api: HealthAPI = Depends(get_api)):
    return respond(await api.assistant_analyze_symptoms(body.symptoms))


@router.post("/health-plan")
async def generate_health_plan(profile: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(await api.assistant_health_plan(profile))

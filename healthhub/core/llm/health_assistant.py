"""
Health Assistant

Prompt builders around GeminiClient. Each structured call asks the model for a
JSON object, extracts the first `{...}` block from the reply and falls back to
a fixed default whenever the client is in mock mode, the call failed, or the
reply does not parse.
"""
import json
import re
from typing import Any, Dict, List, Optional

from healthhub.utils import AssistantError, get_logger
from .gemini_client import GeminiClient

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an advanced medical AI assistant for a health-monitoring application. "
    "You provide general health information only and always remind users to "
    "consult healthcare professionals for serious concerns."
)

CHAT_FALLBACK = (
    "I apologize, but I'm unable to process your request at the moment. "
    "Please try again or consult with a healthcare professional."
)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> Optional[Dict[str, Any]]:
    """Return the outermost JSON object embedded in `text`, or None."""
    match = _JSON_OBJECT.search(text or "")
    if not match:
        return None
    try:
        data = json.loads(match.group())
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON response: {e}")
        return None
    return data if isinstance(data, dict) else None


def _health_data_fallback(text: str = "") -> Dict[str, Any]:
    return {
        "analysis": text or "Analysis unavailable",
        "recommendations": ["Consult with healthcare provider", "Monitor symptoms"],
        "risk_assessment": "Unable to assess risk",
        "confidence": 70,
    }


def _symptom_fallback() -> Dict[str, Any]:
    return {
        "possible_conditions": [],
        "recommendations": ["Consult healthcare provider"],
        "red_flags": [],
    }


def _health_plan_fallback() -> Dict[str, Any]:
    return {
        "plan": "Unable to generate plan",
        "goals": [],
        "timeline": "",
        "milestones": [],
    }


class HealthAssistant:
    """Generative health assistant. Never raises on model failure."""

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    async def _structured(self, prompt: str, task: str) -> Optional[Dict[str, Any]]:
        response = await self.client.generate_async(prompt, system_instruction=SYSTEM_INSTRUCTION)
        if response.is_mock:
            logger.info(f"{task}: model unavailable, using fallback")
            return None
        data = extract_json(response.text)
        if data is None:
            logger.warning(f"{task}: no JSON object in model reply, using fallback")
        return data

    async def analyze_health_data(self, health_data: Dict[str, Any]) -> Dict[str, Any]:
        prompt = (
            "Analyze the following health data and provide a comprehensive health analysis, "
            "specific recommendations, a risk assessment and a confidence level (0-100).\n\n"
            f"Health Data:\n{json.dumps(health_data, indent=2, default=str)}\n\n"
            "Focus on current health status, potential health risks, preventive measures, "
            "lifestyle recommendations and when to seek medical attention.\n\n"
            "Format your response as JSON with the following structure:\n"
            '{"analysis": "detailed analysis", "recommendations": ["..."], '
            '"risk_assessment": "risk level and explanation", "confidence": number}'
        )
        response = await self.client.generate_async(prompt, system_instruction=SYSTEM_INSTRUCTION)
        if response.is_mock:
            return _health_data_fallback()
        data = extract_json(response.text)
        if data is None:
            # Keep the free-text answer as the analysis
            return _health_data_fallback(response.text)
        return {**_health_data_fallback(), **data}

    async def chat(self, message: str, context: Optional[Dict[str, Any]] = None) -> str:
        if not message or not message.strip():
            raise AssistantError("Message must not be empty")

        prompt = f"Respond to the following health-related question:\n\nQuestion: {message.strip()}\n"
        if context:
            prompt += f"\nContext: {json.dumps(context, default=str)}\n"
        prompt += "\nProvide a helpful, accurate and professional response."

        response = await self.client.generate_async(prompt, system_instruction=SYSTEM_INSTRUCTION)
        if response.is_mock or response.error:
            return CHAT_FALLBACK
        return response.text

    async def analyze_symptoms(self, symptoms: List[str]) -> Dict[str, Any]:
        cleaned = [s.strip() for s in symptoms if s and s.strip()]
        if not cleaned:
            raise AssistantError("At least one symptom is required")

        prompt = (
            f"Analyze the following symptoms and provide medical insights:\n\nSymptoms: {', '.join(cleaned)}\n\n"
            "Provide possible conditions with probability percentages, general recommendations "
            "and red-flag symptoms that require immediate attention.\n\n"
            "Format as JSON:\n"
            '{"possible_conditions": [{"name": "...", "probability": number, "description": "...", '
            '"urgency": "low/medium/high/emergency"}], "recommendations": ["..."], "red_flags": ["..."]}'
        )
        data = await self._structured(prompt, "analyze_symptoms")
        return {**_symptom_fallback(), **data} if data else _symptom_fallback()

    async def generate_health_plan(self, user_profile: Dict[str, Any]) -> Dict[str, Any]:
        prompt = (
            "Create a personalized health plan for the following user profile:\n\n"
            f"{json.dumps(user_profile, indent=2, default=str)}\n\n"
            "Include an overall improvement strategy, specific goals, a timeline and weekly milestones.\n\n"
            "Format as JSON:\n"
            '{"plan": "...", "goals": ["..."], "timeline": "...", '
            '"milestones": [{"week": 1, "goal": "..."}]}'
        )
        data = await self._structured(prompt, "generate_health_plan")
        return {**_health_plan_fallback(), **data} if data else _health_plan_fallback()

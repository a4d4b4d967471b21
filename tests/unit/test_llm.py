"""
Unit Tests for the LLM Module

Gemini client mock mode and caching, JSON extraction, and health assistant
fallbacks.
"""
import pytest
from unittest.mock import AsyncMock, Mock

from healthhub.core.llm import (
    GeminiClient,
    GeminiConfig,
    GeminiResponse,
    HealthAssistant,
    extract_json,
)
from healthhub.core.llm.health_assistant import CHAT_FALLBACK
from healthhub.utils import AssistantError


@pytest.fixture
def offline_client() -> GeminiClient:
    """Client without an API key (mock mode)."""
    return GeminiClient(GeminiConfig(api_key=None))


def fake_client(text: str = "", error: str = None, is_mock: bool = False) -> Mock:
    client = Mock(spec=GeminiClient)
    client.generate_async = AsyncMock(return_value=GeminiResponse(
        text=text, model="fake", is_mock=is_mock, error=error,
    ))
    return client


class TestGeminiClient:
    """Tests for the Gemini wrapper without network access."""

    def test_mock_mode_without_key(self, offline_client):
        assert not offline_client.is_available
        response = offline_client.generate("How is my heart rate?")
        assert response.is_mock
        assert response.model == "mock"
        assert response.error is None
        assert "MOCK RESPONSE" in response.text

    async def test_async_mock_mode(self, offline_client):
        response = await offline_client.generate_async("Hello")
        assert response.is_mock

    def test_cache_key_normalises_floats_and_whitespace(self, offline_client):
        a = offline_client._get_cache_key("heart rate 72.04  bpm", "sys")
        b = offline_client._get_cache_key("heart rate   72.01 bpm", "sys")
        c = offline_client._get_cache_key("heart rate 72.04 bpm", "other")
        assert a == b
        assert a != c

    def test_cache_round_trip_and_eviction(self, offline_client):
        offline_client.config.cache_max_entries = 2
        for i in range(3):
            offline_client._add_to_cache(f"k{i}", f"text {i}")

        assert offline_client._get_from_cache("k0") is None
        assert offline_client._get_from_cache("k2") == "text 2"
        assert offline_client.get_stats()["cached_entries"] == 2

    def test_failed_call_returns_mock_with_error(self, offline_client):
        offline_client._initialized = True
        offline_client._llm = Mock()
        offline_client._llm.invoke.side_effect = RuntimeError("quota exceeded")

        response = offline_client.generate("Hello", use_cache=False)
        assert response.is_mock
        assert response.error == "quota exceeded"

    def test_successful_call_is_cached(self, offline_client):
        offline_client._initialized = True
        offline_client._llm = Mock()
        offline_client._llm.invoke.return_value = Mock(content="Drink water", usage_metadata={"input_tokens": 3})

        first = offline_client.generate("Advice?")
        second = offline_client.generate("Advice?")

        assert first.text == second.text == "Drink water"
        assert first.prompt_tokens == 3
        assert second.finish_reason == "CACHED"
        assert offline_client._llm.invoke.call_count == 1


class TestExtractJson:
    """Tests for pulling a JSON object out of free text."""

    def test_embedded_object(self):
        text = 'Sure! Here you go:\n```json\n{"analysis": "ok", "confidence": 80}\n```'
        assert extract_json(text) == {"analysis": "ok", "confidence": 80}

    def test_no_object(self):
        assert extract_json("No structured data here") is None
        assert extract_json("") is None

    def test_invalid_json(self):
        assert extract_json("{not: valid}") is None


class TestHealthAssistant:
    """Tests for prompt handling and fallbacks."""

    async def test_chat_returns_model_text(self):
        assistant = HealthAssistant(fake_client("Stay hydrated."))
        assert await assistant.chat("Any tips?") == "Stay hydrated."

    async def test_chat_fallback_on_error(self):
        assistant = HealthAssistant(fake_client("[MOCK]", error="timeout", is_mock=True))
        assert await assistant.chat("Any tips?") == CHAT_FALLBACK

    async def test_chat_fallback_in_mock_mode(self, offline_client):
        assistant = HealthAssistant(offline_client)
        assert await assistant.chat("Any tips?") == CHAT_FALLBACK

    async def test_chat_hides_mock_text_without_error(self):
        assistant = HealthAssistant(fake_client("[MOCK RESPONSE - Gemini unavailable]", is_mock=True))
        assert await assistant.chat("Any tips?") == CHAT_FALLBACK

    async def test_chat_rejects_empty_message(self):
        assistant = HealthAssistant(fake_client("unused"))
        with pytest.raises(AssistantError):
            await assistant.chat("  ")

    async def test_analyze_symptoms_parses_json(self):
        reply = 'Result: {"possible_conditions": [{"name": "Migraine", "probability": 60}], "red_flags": []}'
        assistant = HealthAssistant(fake_client(reply))

        result = await assistant.analyze_symptoms(["headache"])
        assert result["possible_conditions"][0]["name"] == "Migraine"
        assert result["recommendations"] == ["Consult healthcare provider"]

    async def test_analyze_symptoms_requires_input(self):
        assistant = HealthAssistant(fake_client("unused"))
        with pytest.raises(AssistantError):
            await assistant.analyze_symptoms(["", " "])

    async def test_health_data_keeps_free_text(self):
        assistant = HealthAssistant(fake_client("Your vitals look fine."))
        result = await assistant.analyze_health_data({"heart_rate": 70})
        assert result["analysis"] == "Your vitals look fine."
        assert result["confidence"] == 70

    async def test_health_plan_offline_fallback(self, offline_client):
        result = await HealthAssistant(offline_client).generate_health_plan({"age": 40})
        assert result == {"plan": "Unable to generate plan", "goals": [], "timeline": "", "milestones": []}

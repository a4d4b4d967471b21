"""
LLM Package

Gemini client and the health assistant built on it.
"""
from .gemini_client import GeminiClient, GeminiConfig, GeminiResponse
from .health_assistant import HealthAssistant, extract_json

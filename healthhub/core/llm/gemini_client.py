"""
Gemini API Client

Thin wrapper over LangChain's ChatGoogleGenerativeAI with an in-memory
response cache. Without an API key the client runs in mock mode and returns
canned text, so the rest of the backend never depends on network access.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple
from datetime import datetime
import hashlib
import re

from langchain_google_genai import ChatGoogleGenerativeAI

from healthhub.config import get_settings
from healthhub.utils import get_logger

logger = get_logger(__name__)


def _settings_api_key() -> Optional[str]:
    return get_settings().gemini_api_key


def _settings_model() -> str:
    return get_settings().gemini_model


def _settings_temperature() -> float:
    return get_settings().gemini_temperature


@dataclass
class GeminiConfig:
    """Configuration for the Gemini client. Defaults come from Settings."""
    api_key: Optional[str] = field(default_factory=_settings_api_key)
    model: str = field(default_factory=_settings_model)
    temperature: float = field(default_factory=_settings_temperature)

    max_output_tokens: int = 2048
    top_p: float = 0.8
    top_k: int = 40
    request_timeout_seconds: int = 30
    max_retries: int = 2

    cache_ttl_seconds: int = 900
    cache_max_entries: int = 500


@dataclass
class GeminiResponse:
    """Structured response from Gemini."""
    text: str
    model: str
    finish_reason: str = "STOP"
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0
    is_mock: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "model": self.model,
            "finish_reason": self.finish_reason,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "latency_ms": round(self.latency_ms, 2),
            "is_mock": self.is_mock,
        }


class GeminiClient:
    """
    Client for the Google Gemini API.

    Used for free-text health explanations only. Every failure is logged and
    replaced by a mock response; callers check `is_mock` to decide whether to
    fall back to their own defaults.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        self.config = config or GeminiConfig()
        self._llm = None
        self._request_count = 0
        self._last_request_time: Optional[datetime] = None
        self._initialized = False
        self._cache: Dict[str, Tuple[datetime, str]] = {}

        self._initialize()

    def _initialize(self):
        if not self.config.api_key:
            logger.warning("No Gemini API key provided - mock mode enabled")
            return

        try:
            self._llm = ChatGoogleGenerativeAI(
                model=self.config.model,
                temperature=self.config.temperature,
                max_output_tokens=self.config.max_output_tokens,
                top_p=self.config.top_p,
                top_k=self.config.top_k,
                timeout=self.config.request_timeout_seconds,
                max_retries=self.config.max_retries,
                google_api_key=self.config.api_key,
            )
            self._initialized = True
            logger.info(f"Gemini client initialized with model: {self.config.model}")
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {e}")
            self._initialized = False

    @property
    def is_available(self) -> bool:
        return self._initialized

    def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        use_cache: bool = True
    ) -> GeminiResponse:
        """Blocking generation; see generate_async for use inside request handlers."""
        if not self.is_available:
            return self._mock_response(prompt)

        cache_key = self._get_cache_key(prompt, system_instruction) if use_cache else None
        cached = self._get_from_cache(cache_key) if cache_key else None
        if cached is not None:
            return self._cached_response(cached)

        start_time = datetime.now()
        try:
            response = self._llm.invoke(self._full_prompt(prompt, system_instruction))
        except Exception as e:
            logger.error(f"Gemini generation failed: {e}")
            return self._mock_response(prompt, error=str(e))

        return self._record(response, start_time, cache_key)

    async def generate_async(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        use_cache: bool = True
    ) -> GeminiResponse:
        """Async generation through LangChain's ainvoke."""
        if not self.is_available:
            return self._mock_response(prompt)

        cache_key = self._get_cache_key(prompt, system_instruction) if use_cache else None
        cached = self._get_from_cache(cache_key) if cache_key else None
        if cached is not None:
            return self._cached_response(cached)

        start_time = datetime.now()
        try:
            response = await self._llm.ainvoke(self._full_prompt(prompt, system_instruction))
        except Exception as e:
            logger.error(f"Async Gemini generation failed: {e}")
            return self._mock_response(prompt, error=str(e))

        return self._record(response, start_time, cache_key)

    @staticmethod
    def _full_prompt(prompt: str, system_instruction: Optional[str]) -> str:
        return f"{system_instruction}\n\n{prompt}" if system_instruction else prompt

    def _record(self, response: Any, start_time: datetime, cache_key: Optional[str]) -> GeminiResponse:
        latency = (datetime.now() - start_time).total_seconds() * 1000
        text = response.content if hasattr(response, "content") else str(response)

        usage = getattr(response, "usage_metadata", None) or {}
        self._request_count += 1
        self._last_request_time = datetime.now()

        if cache_key:
            self._add_to_cache(cache_key, text)

        return GeminiResponse(
            text=text,
            model=self.config.model,
            prompt_tokens=usage.get("input_tokens", 0),
            completion_tokens=usage.get("output_tokens", 0),
            latency_ms=latency,
        )

    def _cached_response(self, text: str) -> GeminiResponse:
        logger.debug("Gemini cache hit")
        return GeminiResponse(
            text=text,
            model=f"{self.config.model} (cached)",
            finish_reason="CACHED",
            latency_ms=1.0,
        )

    def _mock_response(self, prompt: str, error: Optional[str] = None) -> GeminiResponse:
        if error:
            mock_text = f"[MOCK RESPONSE - Error: {error}]\n\n"
        else:
            mock_text = "[MOCK RESPONSE - Gemini unavailable]\n\n"

        mock_text += (
            "Your health information has been received. For a reliable assessment, "
            "please consult with a healthcare professional.\n\n"
            "*Note: This is a simulated response for demonstration purposes.*"
        )

        return GeminiResponse(
            text=mock_text,
            model="mock",
            finish_reason="MOCK",
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(mock_text.split()),
            latency_ms=10.0,
            is_mock=True,
            error=error,
        )

    def _get_cache_key(self, prompt: str, system_instruction: Optional[str]) -> str:
        """Hash the prompt with floats rounded to 1 decimal and whitespace collapsed."""
        def _round_float(m: re.Match) -> str:
            return f"{round(float(m.group()), 1)}"

        normalized = re.sub(r"\d+\.\d+", _round_float, prompt)
        normalized = " ".join(normalized.split())
        content = f"{system_instruction or ''}|||{normalized}"
        return hashlib.md5(content.encode()).hexdigest()

    def _get_from_cache(self, cache_key: str) -> Optional[str]:
        if cache_key in self._cache:
            cached_time, cached_text = self._cache[cache_key]
            age = (datetime.now() - cached_time).total_seconds()
            if age < self.config.cache_ttl_seconds:
                return cached_text
            del self._cache[cache_key]
        return None

    def _add_to_cache(self, cache_key: str, text: str):
        self._cache[cache_key] = (datetime.now(), text)
        if len(self._cache) > self.config.cache_max_entries:
            oldest_key = min(self._cache, key=lambda k: self._cache[k][0])
            del self._cache[oldest_key]

    def get_stats(self) -> Dict[str, Any]:
        return {
            "is_available": self.is_available,
            "model": self.config.model,
            "request_count": self._request_count,
            "cached_entries": len(self._cache),
            "last_request": self._last_request_time.isoformat() if self._last_request_time else None,
        }

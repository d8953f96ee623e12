"""
LLM Client

Google Gemini client with ordered model fallback.
The preferred model is tried first, then every other configured model.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from alphadesk.services.base import ExternalAPIError, ValidationError

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(ValidationError):
    """No API key configured for the LLM provider."""
    pass


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    fallback_models: list[str] = field(default_factory=list)
    max_output_tokens: int = 8192
    temperature: float = 0.4
    timeout_seconds: float = 30.0


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str


class GeminiClient:
    """Google Gemini client implementation."""

    name = "GeminiClient"

    def __init__(self, config: LLMConfig):
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    def model_order(self) -> list[str]:
        """Preferred model first, then the fallbacks in configured order."""
        models = [self.config.model]
        for model_name in self.config.fallback_models:
            if model_name not in models:
                models.append(model_name)
        return models

    def _get_model(self, model_name: str):
        """Build a Gemini model handle."""
        try:
            import google.generativeai as genai
        except ImportError:
            raise RuntimeError(
                "google-generativeai package not installed. Run: pip install google-generativeai"
            )

        genai.configure(api_key=self.config.api_key)
        return genai.GenerativeModel(model_name)

    async def _generate_with(self, model_name: str, prompt: str) -> str:
        model = self._get_model(model_name)
        generation_config = {
            "temperature": self.config.temperature,
            "max_output_tokens": self.config.max_output_tokens,
        }

        # Gemini's generate_content is synchronous, wrap in executor
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            lambda: model.generate_content(
                prompt,
                generation_config=generation_config,
                request_options={"timeout": self.config.timeout_seconds},
            ),
        )
        return response.text

    async def generate(self, prompt: str) -> LLMResponse:
        """
        Generate a response, falling back through the configured models.

        Raises:
            LLMNotConfiguredError: No API key set
            ExternalAPIError: Every model failed or returned nothing
        """
        if not self.is_configured:
            raise LLMNotConfiguredError(self.name, "Gemini API key is not configured")

        failures: dict[str, str] = {}
        for model_name in self.model_order():
            try:
                text = await self._generate_with(model_name, prompt)
            except Exception as e:
                logger.warning(f"Model {model_name} failed: {e}, trying next...")
                failures[model_name] = str(e)
                continue

            if text:
                return LLMResponse(content=text, model=model_name)

            logger.warning(f"Model {model_name} returned an empty response")
            failures[model_name] = "empty response"

        raise ExternalAPIError(self.name, "All Gemini models failed", details=failures)

    async def health_check(self) -> bool:
        """The client is usable once a key is configured."""
        return self.is_configured


# Singleton instance management
_llm_client: Optional[GeminiClient] = None


def get_llm_client() -> GeminiClient:
    """Get or create LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        from alphadesk.core.config import settings

        config = LLMConfig(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            fallback_models=list(settings.gemini_fallback_models),
            max_output_tokens=settings.llm_max_output_tokens,
            temperature=settings.llm_temperature,
            timeout_seconds=settings.llm_timeout_seconds,
        )
        _llm_client = GeminiClient(config)
        if not _llm_client.is_configured:
            logger.warning("No Gemini API key configured. AI analysis disabled.")
    return _llm_client

from typing import ClassVar

from docflow.config.settings import Settings
from docflow.genai.client_base import BaseGenAIClient
from docflow.genai.example_client_adapter import ExampleClientAdapter
from docflow.genai.exceptions import GenAIConfigurationError
from docflow.genai.gemini_client_adapter import GeminiClientAdapter
from docflow.genai.openai_client_adapter import OpenAIClientAdapter


class GenAIClientFactory:
    """Creates the configured generation client."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseGenAIClient:
        """Create a generation client from application settings.

        Raises:
            GenAIConfigurationError: if the provider is unknown or lacks an API key.
        """
        provider = settings.genai_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()

        api_key = settings.genai_api_key.strip()
        if not api_key and provider != "ollama":
            raise GenAIConfigurationError(
                f"genai_api_key is required for genai_provider={provider}"
            )

        if provider == "gemini":
            return GeminiClientAdapter(
                api_key=api_key,
                base_url=settings.genai_base_url,
                timeout_seconds=settings.genai_timeout_seconds,
            )
        return OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.genai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            return settings.genai_base_url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "gemini",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise GenAIConfigurationError(
            f"Unknown genai provider '{provider}'. Choose from: {supported}"
        )

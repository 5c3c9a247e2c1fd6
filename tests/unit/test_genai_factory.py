from unittest.mock import patch

import pytest

from docflow.config.settings import Settings
from docflow.genai.example_client_adapter import ExampleClientAdapter
from docflow.genai.exceptions import GenAIConfigurationError
from docflow.genai.factory import GenAIClientFactory
from docflow.genai.gemini_client_adapter import GeminiClientAdapter
from docflow.genai.openai_client_adapter import OpenAIClientAdapter

OPENAI_CLASS = "docflow.genai.openai_client_adapter.openai.OpenAI"


class TestGenAIClientFactory:
    def test_creates_example_without_key(self, settings: Settings) -> None:
        assert isinstance(GenAIClientFactory.create(settings), ExampleClientAdapter)

    def test_creates_gemini(self, settings: Settings) -> None:
        settings.genai_provider = "Gemini"
        settings.genai_api_key = "k"
        assert isinstance(GenAIClientFactory.create(settings), GeminiClientAdapter)

    def test_missing_key_is_configuration_error(self, settings: Settings) -> None:
        settings.genai_provider = "gemini"
        settings.genai_api_key = "   "
        with pytest.raises(GenAIConfigurationError, match="genai_api_key is required"):
            GenAIClientFactory.create(settings)

    def test_openai_uses_default_base_url(self, settings: Settings) -> None:
        settings.genai_provider = "openai"
        settings.genai_api_key = "k"
        with patch(OPENAI_CLASS) as mock_openai:
            client = GenAIClientFactory.create(settings)
        assert isinstance(client, OpenAIClientAdapter)
        assert mock_openai.call_args.kwargs["base_url"] is None

    def test_openai_compatible_uses_configured_base_url(self, settings: Settings) -> None:
        settings.genai_provider = "openai_compatible"
        settings.genai_api_key = "k"
        settings.genai_base_url = "http://llm.internal/v1"
        with patch(OPENAI_CLASS) as mock_openai:
            GenAIClientFactory.create(settings)
        assert mock_openai.call_args.kwargs["base_url"] == "http://llm.internal/v1"

    def test_ollama_needs_no_key(self, settings: Settings) -> None:
        settings.genai_provider = "ollama"
        with patch(OPENAI_CLASS) as mock_openai:
            GenAIClientFactory.create(settings)
        assert mock_openai.call_args.kwargs["base_url"] == "http://localhost:11434/v1"

    def test_unknown_provider_raises(self, settings: Settings) -> None:
        settings.genai_provider = "mystery"
        settings.genai_api_key = "k"
        with pytest.raises(GenAIConfigurationError, match="Unknown genai provider 'mystery'"):
            GenAIClientFactory.create(settings)

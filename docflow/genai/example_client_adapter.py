"""Example generation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenAIClient and register the provider in GenAIClientFactory.
"""

import json
from typing import ClassVar

from docflow.genai.client_base import BaseGenAIClient
from docflow.genai.models import GENERATE_CONTENT, ModelInfo


class ExampleClientAdapter(BaseGenAIClient):
    """Example adapter that answers with a fixed summary and tag set.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters.
    """

    MODEL_NAME: ClassVar[str] = "models/gemini-example-flash"
    DEFAULT_SUMMARY: ClassVar[str] = "This document was summarized by the example adapter."
    DEFAULT_TAGS: ClassVar[list[dict[str, str]]] = [
        {"name": "Example", "color": "#3b82f6"},
        {"name": "Document", "color": "#10b981"},
    ]

    def list_models(self) -> list[ModelInfo]:
        return [ModelInfo(name=self.MODEL_NAME, supported_methods=(GENERATE_CONTENT,))]

    def generate(
        self,
        *,
        model: str,
        prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        _ = model, temperature, max_output_tokens
        if "JSON array" in prompt:
            return json.dumps(self.DEFAULT_TAGS)
        return self.DEFAULT_SUMMARY

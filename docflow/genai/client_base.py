from abc import ABC, abstractmethod

from docflow.genai.models import ModelInfo


class BaseGenAIClient(ABC):
    """Contract for provider-specific text generation clients."""

    @abstractmethod
    def list_models(self) -> list[ModelInfo]:
        """Return the models available to the configured credentials."""

    @abstractmethod
    def generate(
        self,
        *,
        model: str,
        prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Return the model's text answer to a single prompt.

        An empty string means the provider answered without text.
        """

    def close(self) -> None:
        """Release network resources held by the client."""

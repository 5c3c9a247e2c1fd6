import httpx
import openai

from docflow.genai.client_base import BaseGenAIClient
from docflow.genai.exceptions import GenAIModelNotFoundError, GenAIServiceError, classify_status
from docflow.genai.models import GENERATE_CONTENT, ModelInfo


class OpenAIClientAdapter(BaseGenAIClient):
    """Generation client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def list_models(self) -> list[ModelInfo]:
        try:
            page = self._client.models.list()
        except openai.APIStatusError as exc:
            raise classify_status(exc.status_code, str(exc)) from exc
        except (openai.APIConnectionError, httpx.HTTPError) as exc:
            raise GenAIServiceError(f"AI provider network error: {exc}") from exc
        return [ModelInfo(name=model.id, supported_methods=(GENERATE_CONTENT,)) for model in page]

    def generate(
        self,
        *,
        model: str,
        prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_output_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.NotFoundError as exc:
            raise GenAIModelNotFoundError(f"Model '{model}' not found: {exc}") from exc
        except openai.APIStatusError as exc:
            raise classify_status(exc.status_code, str(exc)) from exc
        except (openai.APIConnectionError, httpx.HTTPError) as exc:
            raise GenAIServiceError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise GenAIServiceError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def close(self) -> None:
        self._client.close()

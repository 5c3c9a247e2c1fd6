from typing import Any

import httpx

from docflow.genai.client_base import BaseGenAIClient
from docflow.genai.exceptions import GenAIServiceError, classify_status
from docflow.genai.models import ModelInfo


class GeminiClientAdapter(BaseGenAIClient):
    """Generation client for the Gemini REST API (``v1beta``)."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"x-goog-api-key": api_key},
            transport=transport,
        )

    def list_models(self) -> list[ModelInfo]:
        models: list[ModelInfo] = []
        params: dict[str, str] = {}
        while True:
            payload = self._request("GET", "models", params=params)
            for entry in payload.get("models") or []:
                name = entry.get("name")
                if not isinstance(name, str):
                    continue
                methods = tuple(entry.get("supportedGenerationMethods") or ())
                models.append(ModelInfo(name=name, supported_methods=methods))
            page_token = payload.get("nextPageToken")
            if not page_token:
                return models
            params = {"pageToken": page_token}

    def generate(
        self,
        *,
        model: str,
        prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        payload = self._request(
            "POST",
            f"models/{model}:generateContent",
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": temperature,
                    "maxOutputTokens": max_output_tokens,
                },
            },
        )
        candidates = payload.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise GenAIServiceError(f"Generation API network error: {exc}") from exc

        if not response.is_success:
            raise classify_status(response.status_code, response.text[:500])

        try:
            payload = response.json()
        except ValueError as exc:
            raise GenAIServiceError(f"Generation API returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise GenAIServiceError("Generation API returned a non-object JSON body")
        return payload

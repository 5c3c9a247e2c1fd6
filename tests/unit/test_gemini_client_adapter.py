import json

import httpx
import pytest

from docflow.errors import ErrorKind
from docflow.genai.exceptions import GenAIModelNotFoundError, GenAIServiceError
from docflow.genai.gemini_client_adapter import GeminiClientAdapter

BASE_URL = "https://generativelanguage.test/v1beta"


def _adapter(handler) -> GeminiClientAdapter:
    return GeminiClientAdapter(
        api_key="secret-key",
        base_url=BASE_URL,
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


def _answer(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestGenerate:
    def test_posts_prompt_and_returns_text(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_answer("A short summary."))

        result = _adapter(handler).generate(
            model="gemini-1.5-flash", prompt="Summarize", temperature=0.7, max_output_tokens=500
        )

        assert result == "A short summary."
        request = seen[0]
        assert request.url.path == "/v1beta/models/gemini-1.5-flash:generateContent"
        assert request.headers["x-goog-api-key"] == "secret-key"
        body = json.loads(request.content)
        assert body["contents"][0]["parts"][0]["text"] == "Summarize"
        assert body["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 500}

    def test_joins_multiple_parts(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}
        adapter = _adapter(lambda request: httpx.Response(200, json=payload))

        assert adapter.generate(model="m", prompt="p", temperature=0, max_output_tokens=1) == "ab"

    def test_no_candidates_returns_empty(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json={"candidates": []}))

        assert adapter.generate(model="m", prompt="p", temperature=0, max_output_tokens=1) == ""

    def test_404_is_model_not_found(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(404, text="model retired"))

        with pytest.raises(GenAIModelNotFoundError) as exc_info:
            adapter.generate(model="old", prompt="p", temperature=0, max_output_tokens=1)

        assert exc_info.value.kind is ErrorKind.PERMANENT

    @pytest.mark.parametrize("status", [400, 429, 500, 503])
    def test_other_statuses_are_transient(self, status: int) -> None:
        adapter = _adapter(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(GenAIServiceError) as exc_info:
            adapter.generate(model="m", prompt="p", temperature=0, max_output_tokens=1)

        assert exc_info.value.kind is ErrorKind.TRANSIENT

    def test_network_error_is_transient(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GenAIServiceError, match="network error"):
            _adapter(handler).generate(model="m", prompt="p", temperature=0, max_output_tokens=1)

    def test_invalid_json_is_transient(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(GenAIServiceError, match="invalid JSON"):
            adapter.generate(model="m", prompt="p", temperature=0, max_output_tokens=1)


class TestListModels:
    def test_follows_page_tokens(self) -> None:
        pages = {
            None: {
                "models": [
                    {"name": "models/gemini-1.5-flash", "supportedGenerationMethods": ["generateContent"]}
                ],
                "nextPageToken": "p2",
            },
            "p2": {"models": [{"name": "models/embedding-001", "supportedGenerationMethods": ["embedContent"]}]},
        }

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=pages[request.url.params.get("pageToken")])

        models = _adapter(handler).list_models()

        assert [m.short_name for m in models] == ["gemini-1.5-flash", "embedding-001"]
        assert models[0].supports("generateContent")
        assert not models[1].supports("generateContent")

    def test_skips_entries_without_name(self) -> None:
        payload = {"models": [{"displayName": "nameless"}, {"name": "models/gemini-pro"}]}
        adapter = _adapter(lambda request: httpx.Response(200, json=payload))

        assert [m.name for m in adapter.list_models()] == ["models/gemini-pro"]

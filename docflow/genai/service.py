from docflow.config.settings import Settings
from docflow.documents.models import Tag
from docflow.genai.client_base import BaseGenAIClient
from docflow.genai.exceptions import GenAIEmptyResponseError
from docflow.genai.model_selector import ModelSelector
from docflow.genai.prompt_loader import load_prompt_template
from docflow.genai.tag_parser import parse_tags
from docflow.logging.logger import Log

TRUNCATION_MARKER = "... [truncated]"


class GenAIService:
    """Summary and tag generation over a provider client.

    Pipeline per call: truncate -> build prompt -> select model -> generate.
    """

    def __init__(
        self,
        client: BaseGenAIClient,
        selector: ModelSelector,
        settings: Settings,
        summary_template: str | None = None,
        tags_template: str | None = None,
    ) -> None:
        self._client = client
        self._selector = selector
        self._temperature = settings.genai_temperature
        self._max_output_tokens = settings.genai_max_output_tokens
        self._tags_max_output_tokens = settings.genai_tags_max_output_tokens
        self._max_input_chars = settings.genai_max_input_chars
        self._summary_template = summary_template or load_prompt_template("summary_prompt.txt")
        self._tags_template = tags_template or load_prompt_template("tags_prompt.txt")

    def generate_summary(self, text: str) -> str:
        """Summarize ``text`` in a few sentences.

        Raises:
            GenAIEmptyResponseError: if the model returns no text.
            GenAIModelNotFoundError: if the selected model does not exist.
            GenAIServiceError: on any other provider failure.
        """
        prompt = self._summary_template.format(document_text=self._truncate(text))
        model = self._selector.select()
        Log.info(f"Generating summary with model '{model}' for {len(text)} characters")
        summary = self._client.generate(
            model=model,
            prompt=prompt,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        ).strip()
        if not summary:
            raise GenAIEmptyResponseError(f"Model '{model}' returned an empty summary")
        Log.info(f"Generated summary of {len(summary)} characters")
        return summary

    def generate_tags(self, text: str) -> list[Tag]:
        """Suggest up to four tags for ``text``. An unusable answer yields []."""
        if not text.strip():
            return []
        prompt = self._tags_template.format(document_text=self._truncate(text))
        model = self._selector.select()
        Log.info(f"Generating tags with model '{model}'")
        raw = self._client.generate(
            model=model,
            prompt=prompt,
            temperature=self._temperature,
            max_output_tokens=self._tags_max_output_tokens,
        )
        tags = parse_tags(raw)
        Log.info(f"Generated {len(tags)} tags")
        return tags

    def _truncate(self, text: str) -> str:
        if len(text) <= self._max_input_chars:
            return text
        return text[: self._max_input_chars] + TRUNCATION_MARKER

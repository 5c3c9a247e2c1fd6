from docflow.genai.client_base import BaseGenAIClient
from docflow.genai.models import GENERATE_CONTENT
from docflow.logging.logger import Log


class ModelSelector:
    """Picks a live model before each call.

    Providers retire model names without notice, so the advertised list is
    consulted first and the configured name is only a fallback.
    """

    def __init__(
        self,
        client: BaseGenAIClient,
        *,
        family: str,
        preferred_keywords: list[str],
        fallback_model: str,
    ) -> None:
        self._client = client
        self._family = family.lower()
        self._keywords = [keyword.lower() for keyword in preferred_keywords]
        self._fallback_model = fallback_model

    def select(self) -> str:
        try:
            models = self._client.list_models()
        except Exception as exc:
            Log.warning(f"Could not list available models, using '{self._fallback_model}': {exc}")
            return self._fallback_model

        for model in models:
            name = model.name.lower()
            if self._family not in name:
                continue
            if not any(keyword in name for keyword in self._keywords):
                continue
            if model.supports(GENERATE_CONTENT):
                Log.debug(f"Selected model '{model.short_name}'")
                return model.short_name

        Log.warning(f"No matching model advertised, using '{self._fallback_model}'")
        return self._fallback_model

from pathlib import Path

from docflow.genai.exceptions import GenAIConfigurationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt template from a file.

    Args:
        name: File name of the template, e.g. ``summary_prompt.txt``.
        prompt_dir: Directory holding the templates.
                    Defaults to the bundled prompts directory.

    Returns:
        The raw template string with a ``{document_text}`` placeholder.

    Raises:
        GenAIConfigurationError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GenAIConfigurationError(f"Failed to load prompt template {name}: {exc}") from exc

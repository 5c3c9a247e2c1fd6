import json

from docflow.documents.exceptions import TagValidationError
from docflow.documents.models import MAX_TAG_NAME_LENGTH, Tag
from docflow.genai.palette import palette_color
from docflow.logging.logger import Log

MAX_GENERATED_TAGS = 4


def strip_code_fence(raw: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned.strip()


def parse_tags(raw: str, max_tags: int = MAX_GENERATED_TAGS) -> list[Tag]:
    """Parse the model's tag answer. Anything unusable yields no tags."""
    cleaned = strip_code_fence(raw)
    if not cleaned:
        return []
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        Log.warning(f"Tag response is not valid JSON, ignoring it: {exc}")
        return []
    if not isinstance(parsed, list):
        Log.warning("Tag response is not a JSON array, ignoring it")
        return []

    tags: list[Tag] = []
    for item in parsed:
        if len(tags) >= max_tags:
            break
        tag = _build_tag(item)
        if tag is not None:
            tags.append(tag)
    return tags


def _build_tag(item: object) -> Tag | None:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    name = name.strip()
    if len(name) > MAX_TAG_NAME_LENGTH:
        Log.debug(f"Dropping generated tag longer than {MAX_TAG_NAME_LENGTH} characters")
        return None
    color = item.get("color")
    try:
        return Tag(name=name, color=color.strip() if isinstance(color, str) else "")
    except TagValidationError:
        return Tag(name=name, color=palette_color(name))

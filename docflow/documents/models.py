import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from docflow.documents.exceptions import TagValidationError

MAX_TAG_NAME_LENGTH = 100
_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class Tag:
    """A document label. Identity is the case-insensitive name."""

    name: str
    color: str

    def __post_init__(self) -> None:
        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            raise TagValidationError("Tag name must be a non-empty string")
        if len(name) > MAX_TAG_NAME_LENGTH:
            raise TagValidationError(
                f"Tag name exceeds {MAX_TAG_NAME_LENGTH} characters: {name[:20]}..."
            )
        if not isinstance(self.color, str) or not _COLOR_RE.match(self.color):
            raise TagValidationError(f"Tag color must be '#rrggbb', got {self.color!r}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "color", self.color.lower())

    @property
    def key(self) -> str:
        # Same normalization as the lower(name) unique index on tags.
        return self.name.lower()


@dataclass
class DocumentLog:
    """One entry of a document's activity history. ``id`` is None until stored."""

    action: str
    details: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: int | None = None


@dataclass(frozen=True)
class AccessLog:
    """Daily access counter for a document."""

    date: date
    count: int


@dataclass
class Document:
    """Document aggregate as seen by the pipeline stages."""

    id: int
    file_name: str
    file_path: str
    ocr_text: str | None = None
    summary: str | None = None
    uploaded_at: datetime | None = None
    access_count: int = 0
    tags: list[Tag] = field(default_factory=list)
    logs: list[DocumentLog] = field(default_factory=list)
    access_logs: list[AccessLog] = field(default_factory=list)

    @property
    def has_ocr_text(self) -> bool:
        return bool(self.ocr_text and self.ocr_text.strip())

    @property
    def has_summary(self) -> bool:
        return bool(self.summary and self.summary.strip())

    def has_tag(self, name: str) -> bool:
        key = name.strip().lower()
        return any(tag.key == key for tag in self.tags)

    def merge_tags(self, tags: list[Tag]) -> list[Tag]:
        """Add tags whose name is not present yet (case-insensitive).

        Returns:
            The tags actually added, in input order. Merging the same
            set twice adds nothing the second time.
        """
        existing = {tag.key for tag in self.tags}
        added: list[Tag] = []
        for tag in tags:
            if tag.key in existing:
                continue
            existing.add(tag.key)
            self.tags.append(tag)
            added.append(tag)
        return added

    def add_log(self, action: str, details: str | None = None) -> DocumentLog:
        entry = DocumentLog(action=action, details=details)
        self.logs.append(entry)
        return entry

from dataclasses import dataclass, field

GENERATE_CONTENT = "generateContent"


@dataclass(frozen=True)
class ModelInfo:
    """A model advertised by the provider."""

    name: str
    supported_methods: tuple[str, ...] = field(default_factory=tuple)

    @property
    def short_name(self) -> str:
        return self.name.removeprefix("models/")

    def supports(self, method: str) -> bool:
        return method in self.supported_methods

from enum import StrEnum


class Backend(StrEnum):
    """An LLM backend that Repo Scout can generate text with."""

    GEMINI = "gemini"
    GROQ = "groq"
    OPENAI = "openai"

    @property
    def display_name(self) -> str:
        return BACKEND_DISPLAY_NAMES[self]

    @property
    def storage_key(self) -> str:
        """The key the backend's secret is persisted under."""
        return f"{self.value.upper()}_API_KEY"


BACKEND_DISPLAY_NAMES: dict[Backend, str] = {
    Backend.GEMINI: "Gemini",
    Backend.GROQ: "Groq",
    Backend.OPENAI: "OpenAI",
}


def parse_backend(value: "Backend | str") -> Backend | None:
    """Return the backend for a backend name, or None if the name is unknown."""

    if isinstance(value, Backend):
        return value

    try:
        return Backend(value.strip().lower())
    except ValueError:
        return None

import math
import os
from pathlib import Path
from typing import Self

from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, Field

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_TEMPERATURE = 0.7

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

DEFAULT_CREDENTIALS_FILE = Path.home() / ".repo-scout" / "credentials.json"


def get_fallback_on_error() -> bool:
    return os.getenv("REPO_SCOUT_FALLBACK_ON_ERROR", "").strip().lower() in {"1", "true", "yes", "on"}


def get_timeout() -> float | None:
    if not (raw_timeout := os.getenv("REPO_SCOUT_TIMEOUT", "").strip()):
        return DEFAULT_TIMEOUT_SECONDS

    try:
        timeout = float(raw_timeout)
    except ValueError:
        logger.warning(f"Ignoring invalid REPO_SCOUT_TIMEOUT {raw_timeout!r}, using {DEFAULT_TIMEOUT_SECONDS} seconds.")
        return DEFAULT_TIMEOUT_SECONDS

    if not math.isfinite(timeout):
        logger.warning(f"Ignoring non-finite REPO_SCOUT_TIMEOUT {raw_timeout!r}, using {DEFAULT_TIMEOUT_SECONDS} seconds.")
        return DEFAULT_TIMEOUT_SECONDS

    return timeout if timeout > 0 else None


def get_credentials_file() -> Path:
    if credentials_file := os.getenv("REPO_SCOUT_CREDENTIALS_FILE"):
        return Path(credentials_file).expanduser()

    return DEFAULT_CREDENTIALS_FILE


def get_github_token() -> str | None:
    for env_var in ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN"):
        if token := os.getenv(env_var):
            return token

    return None


def credential_tools_enabled() -> bool:
    return not bool(os.getenv("DISABLE_CREDENTIAL_TOOLS"))


class GenerationSettings(BaseModel):
    """Settings for the generation client."""

    fallback_on_error: bool = Field(
        default=False,
        description="Whether a failed backend is followed by the next configured backend within the same call.",
    )
    timeout: float | None = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        description="The deadline for a single backend call in seconds. None disables the deadline.",
    )
    temperature: float = Field(default=DEFAULT_TEMPERATURE, description="The temperature used by backends without constrained decoding.")
    gemini_model: str = Field(default=DEFAULT_GEMINI_MODEL)
    groq_model: str = Field(default=DEFAULT_GROQ_MODEL)
    openai_model: str = Field(default=DEFAULT_OPENAI_MODEL)

    @classmethod
    def from_env(cls) -> Self:
        return cls(
            fallback_on_error=get_fallback_on_error(),
            timeout=get_timeout(),
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            groq_model=os.getenv("GROQ_MODEL") or DEFAULT_GROQ_MODEL,
            openai_model=os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        )

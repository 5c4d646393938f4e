from abc import ABC, abstractmethod
from logging import Logger
from typing import Any

from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel

from repo_scout.models.backend import Backend

SchemaDescriptor = type[BaseModel] | dict[str, Any]

JSON_INSTRUCTION = "\n\nReturn ONLY valid JSON."


class BaseBackend(ABC):
    """A backend adapter: builds the backend's request, performs it and extracts the generated text.

    Adapters raise BackendError when the backend rejects or fails the call."""

    backend: Backend
    model: str
    logger: Logger

    def __init__(self, backend: Backend, model: str, logger: Logger | None = None):
        self.backend = backend
        self.model = model
        self.logger = logger or get_logger(name=__name__)

    @property
    def supports_schema(self) -> bool:
        """Whether the backend honours a schema natively instead of through the prompt."""
        return False

    @abstractmethod
    async def generate(self, prompt: str, api_key: str, schema: SchemaDescriptor | None = None) -> str:
        """Generate text for a prompt using the given API key."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend={self.backend.value!r}, model={self.model!r})"

import asyncio
from collections.abc import Sequence
from logging import Logger

import httpx
from fastmcp.utilities.logging import get_logger

from repo_scout.credentials.store import CredentialStore
from repo_scout.llm.backends.base import BaseBackend, SchemaDescriptor
from repo_scout.llm.backends.chat_completions import ChatCompletionsBackend
from repo_scout.llm.backends.google_genai import GoogleGenaiBackend
from repo_scout.llm.errors import GenerationError, GenerationTimeoutError, NoCredentialError
from repo_scout.models.backend import Backend
from repo_scout.settings import GenerationSettings


def default_backends(settings: GenerationSettings | None = None, http_client: httpx.AsyncClient | None = None) -> list[BaseBackend]:
    """The supported backends, in priority order."""

    settings = settings or GenerationSettings()

    return [
        GoogleGenaiBackend(model=settings.gemini_model),
        ChatCompletionsBackend.groq(model=settings.groq_model, temperature=settings.temperature, http_client=http_client),
        ChatCompletionsBackend.openai(model=settings.openai_model, temperature=settings.temperature, http_client=http_client),
    ]


class GenerationClient:
    """Generates text with the highest priority backend that has a credential configured."""

    credential_store: CredentialStore
    backends: list[BaseBackend]
    settings: GenerationSettings
    logger: Logger

    def __init__(
        self,
        credential_store: CredentialStore,
        backends: Sequence[BaseBackend] | None = None,
        settings: GenerationSettings | None = None,
        logger: Logger | None = None,
    ):
        self.credential_store = credential_store
        self.settings = settings or GenerationSettings()
        self.backends = list(backends) if backends is not None else default_backends(settings=self.settings)
        self.logger = logger or get_logger(name=__name__)

    def configured_backends(self) -> list[tuple[BaseBackend, str]]:
        """All backends with a credential, in priority order, paired with their secret."""

        configured: list[tuple[BaseBackend, str]] = []

        for backend in self.backends:
            if api_key := self.credential_store.resolve(backend.backend):
                configured.append((backend, api_key))

        return configured

    def select_backend(self) -> tuple[BaseBackend, str] | None:
        """The highest priority backend with a credential, paired with its secret."""

        for backend in self.backends:
            if api_key := self.credential_store.resolve(backend.backend):
                return backend, api_key

        return None

    def active_backend(self) -> Backend | None:
        """The backend a call to `generate` would currently use."""

        if selected := self.select_backend():
            return selected[0].backend

        return None

    async def generate(self, prompt: str, schema: SchemaDescriptor | None = None, timeout: float | None = None) -> str:
        """Generate text for a prompt.

        Args:
            prompt: The prompt to send.
            schema: The expected shape of the answer. Honoured natively by backends that support
                constrained decoding, ignored by the others.
            timeout: The deadline for the backend call in seconds. Defaults to the configured deadline.

        Raises:
            NoCredentialError: If no backend has a credential configured.
            GenerationTimeoutError: If the backend does not answer before the deadline.
            GenerationError: If the backend call fails.
        """

        if self.settings.fallback_on_error:
            candidates = self.configured_backends()
        else:
            candidates = [selected] if (selected := self.select_backend()) else []

        if not candidates:
            raise NoCredentialError

        deadline: float | None = timeout if timeout is not None else self.settings.timeout

        failures: list[GenerationError] = []

        for backend, api_key in candidates:
            try:
                return await self._generate_with(backend=backend, api_key=api_key, prompt=prompt, schema=schema, timeout=deadline)
            except GenerationError as e:
                if not self.settings.fallback_on_error:
                    raise

                failures.append(e)
                self.logger.warning(f"Backend {backend.backend.value} failed, trying the next configured backend: {e}")

        raise failures[-1]

    async def _generate_with(
        self, backend: BaseBackend, api_key: str, prompt: str, schema: SchemaDescriptor | None, timeout: float | None
    ) -> str:
        self.logger.info(f"Generating with {backend!r} for a prompt of {len(prompt)} characters.")

        try:
            async with asyncio.timeout(timeout):
                text: str = await backend.generate(prompt=prompt, api_key=api_key, schema=schema)
        except TimeoutError as e:
            if timeout is None:
                raise GenerationError.from_backend_failure(backend=backend.backend, error=e) from e

            self.logger.warning(f"Backend {backend.backend.value} did not answer within {timeout} seconds.")
            raise GenerationTimeoutError(backend=backend.backend, timeout=timeout) from e
        except Exception as e:
            self.logger.exception(f"Error generating with {backend!r}")
            raise GenerationError.from_backend_failure(backend=backend.backend, error=e) from e

        self.logger.info(f"Backend {backend.backend.value} returned {len(text)} characters.")

        return text

from collections.abc import Callable
from logging import Logger
from typing import override

import httpx
from google.genai import Client as GoogleGenaiClient
from google.genai.errors import APIError as GoogleGenaiAPIError
from google.genai.types import Candidate, GenerateContentConfig, GenerateContentResponse

from repo_scout.llm.backends.base import BaseBackend, SchemaDescriptor
from repo_scout.llm.errors import BackendError, ErrorCode
from repo_scout.models.backend import Backend
from repo_scout.settings import DEFAULT_GEMINI_MODEL

GoogleGenaiClientFactory = Callable[[str], GoogleGenaiClient]


def new_google_genai_client(api_key: str) -> GoogleGenaiClient:
    return GoogleGenaiClient(api_key=api_key)


def get_candidate_from_response(response: GenerateContentResponse) -> Candidate | None:
    if response.candidates and response.candidates[0]:
        return response.candidates[0]

    return None


class GoogleGenaiBackend(BaseBackend):
    """Gemini, which accepts a structured-output schema alongside the prompt."""

    def __init__(
        self,
        model: str = DEFAULT_GEMINI_MODEL,
        client_factory: GoogleGenaiClientFactory | None = None,
        logger: Logger | None = None,
    ):
        super().__init__(backend=Backend.GEMINI, model=model, logger=logger)
        self.client_factory: GoogleGenaiClientFactory = client_factory or new_google_genai_client

    @property
    @override
    def supports_schema(self) -> bool:
        return True

    def build_config(self, schema: SchemaDescriptor | None = None) -> GenerateContentConfig:
        if schema is None:
            return GenerateContentConfig(response_mime_type="application/json")

        return GenerateContentConfig(response_mime_type="application/json", response_schema=schema)

    def extract_text(self, response: GenerateContentResponse) -> str:
        if text := response.text:
            return text

        finish_reason = candidate.finish_reason if (candidate := get_candidate_from_response(response)) else None

        raise BackendError(
            backend=self.backend,
            message=f"No content in response from completion: {finish_reason}",
            code=ErrorCode.EMPTY_RESPONSE,
        )

    @override
    async def generate(self, prompt: str, api_key: str, schema: SchemaDescriptor | None = None) -> str:
        client: GoogleGenaiClient = self.client_factory(api_key)

        try:
            response: GenerateContentResponse = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.build_config(schema=schema),
            )
        except GoogleGenaiAPIError as e:
            raise BackendError(backend=self.backend, message=e.message, status=e.code) from e
        except httpx.TransportError as e:
            raise BackendError(backend=self.backend, message=str(e) or type(e).__name__, code=ErrorCode.TRANSPORT) from e
        finally:
            await client.aio.aclose()

        return self.extract_text(response)

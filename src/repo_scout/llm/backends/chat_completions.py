from logging import Logger
from typing import Any, Self, override

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from openai.types.chat import ChatCompletion

from repo_scout.llm.backends.base import JSON_INSTRUCTION, BaseBackend, SchemaDescriptor
from repo_scout.llm.errors import BackendError, ErrorCode
from repo_scout.models.backend import Backend
from repo_scout.settings import DEFAULT_GROQ_MODEL, DEFAULT_OPENAI_MODEL, DEFAULT_TEMPERATURE

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


def error_message_from_body(body: object) -> str | None:
    """Best-effort extraction of the human readable message from an error response body."""

    if not isinstance(body, dict):
        return None

    if isinstance(message := body.get("message"), str) and message:  # pyright: ignore[reportUnknownMemberType]
        return message

    if isinstance(error := body.get("error"), dict):  # pyright: ignore[reportUnknownMemberType]
        return error_message_from_body(error)  # pyright: ignore[reportUnknownArgumentType]

    return None


class ChatCompletionsBackend(BaseBackend):
    """A chat-completions backend. These have no constrained decoding, so the schema is ignored
    and the prompt asks for JSON instead."""

    def __init__(
        self,
        backend: Backend,
        model: str,
        base_url: str | None = None,
        json_mode: bool = False,
        temperature: float = DEFAULT_TEMPERATURE,
        http_client: httpx.AsyncClient | None = None,
        logger: Logger | None = None,
    ):
        super().__init__(backend=backend, model=model, logger=logger)
        self.base_url: str | None = base_url
        self.json_mode: bool = json_mode
        self.temperature: float = temperature
        self.http_client: httpx.AsyncClient | None = http_client

    @classmethod
    def groq(
        cls,
        model: str = DEFAULT_GROQ_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        http_client: httpx.AsyncClient | None = None,
        logger: Logger | None = None,
    ) -> Self:
        return cls(
            backend=Backend.GROQ, model=model, base_url=GROQ_BASE_URL, temperature=temperature, http_client=http_client, logger=logger
        )

    @classmethod
    def openai(
        cls,
        model: str = DEFAULT_OPENAI_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        http_client: httpx.AsyncClient | None = None,
        logger: Logger | None = None,
    ) -> Self:
        return cls(backend=Backend.OPENAI, model=model, json_mode=True, temperature=temperature, http_client=http_client, logger=logger)

    def build_request(self, prompt: str) -> dict[str, Any]:
        request: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt + JSON_INSTRUCTION}],
            "temperature": self.temperature,
        }

        if self.json_mode:
            request["response_format"] = {"type": "json_object"}

        return request

    def extract_text(self, completion: ChatCompletion) -> str:
        if completion.choices and (content := completion.choices[0].message.content):
            return content

        raise BackendError(backend=self.backend, message="No content in response from completion.", code=ErrorCode.EMPTY_RESPONSE)

    def _new_client(self, api_key: str) -> AsyncOpenAI:
        # Retries are left to the caller
        return AsyncOpenAI(api_key=api_key, base_url=self.base_url, max_retries=0, http_client=self.http_client)

    @override
    async def generate(self, prompt: str, api_key: str, schema: SchemaDescriptor | None = None) -> str:
        client: AsyncOpenAI = self._new_client(api_key=api_key)

        try:
            completion: ChatCompletion = await client.chat.completions.create(**self.build_request(prompt=prompt))  # pyright: ignore[reportAny]
        except APIStatusError as e:
            raise BackendError(backend=self.backend, message=error_message_from_body(e.body), status=e.status_code) from e
        except APIConnectionError as e:
            raise BackendError(backend=self.backend, message=e.message, code=ErrorCode.TRANSPORT) from e
        finally:
            if self.http_client is None:
                await client.close()

        return self.extract_text(completion)

import asyncio
from collections.abc import Sequence
from typing import Any, override

import pytest
from pydantic import BaseModel

from repo_scout.clients.errors.github import ResourceNotFoundError
from repo_scout.clients.github import README_NOT_FOUND_MESSAGE, REPOSITORY_NOT_FOUND_MESSAGE, RepositoryClient
from repo_scout.clients.models.github import Repository
from repo_scout.credentials.storage import InMemoryStorage
from repo_scout.credentials.store import CredentialStore
from repo_scout.llm.backends.base import BaseBackend, SchemaDescriptor
from repo_scout.llm.client import GenerationClient
from repo_scout.models.analysis import RepositoryStats
from repo_scout.models.backend import Backend
from repo_scout.settings import GenerationSettings


class StaticBackend(BaseBackend):
    """A backend that answers every call with the same text or the same error."""

    def __init__(self, backend: Backend, text: str = "{}", error: Exception | None = None, delay: float = 0):
        super().__init__(backend=backend, model=f"{backend.value}-test-model")
        self.text: str = text
        self.error: Exception | None = error
        self.delay: float = delay
        self.calls: list[dict[str, Any]] = []

    @override
    async def generate(self, prompt: str, api_key: str, schema: SchemaDescriptor | None = None) -> str:
        self.calls.append({"prompt": prompt, "api_key": api_key, "schema": schema})

        if self.delay:
            await asyncio.sleep(self.delay)

        if self.error:
            raise self.error

        return self.text


def static_backends(**texts: str) -> list[StaticBackend]:
    """One StaticBackend per backend, in priority order, answering with the text given for it."""
    return [StaticBackend(backend=backend, text=texts.get(backend.value, "{}")) for backend in Backend]


class FakeRepositoryClient(RepositoryClient):
    """A repository client serving a fixed set of repositories instead of calling GitHub."""

    def __init__(self, repositories: Sequence[Repository] = (), readmes: dict[str, str] | None = None):
        super().__init__(githubkit_client=object())  # pyright: ignore[reportArgumentType]
        self.repositories: dict[str, Repository] = {repository.full_name: repository for repository in repositories}
        self.readmes: dict[str, str] = readmes or {}

    @override
    async def get_repository(self, owner: str, repo: str) -> Repository:
        if repository := self.repositories.get(f"{owner}/{repo}"):
            return repository

        raise ResourceNotFoundError(message=REPOSITORY_NOT_FOUND_MESSAGE, resource=f"{owner}/{repo}")

    @override
    async def get_readme(self, owner: str, repo: str) -> str:
        if (readme := self.readmes.get(f"{owner}/{repo}")) is not None:
            return readme

        raise ResourceNotFoundError(message=README_NOT_FOUND_MESSAGE, resource=f"{owner}/{repo}")


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def credential_store(storage: InMemoryStorage) -> CredentialStore:
    """A credential store that ignores the process environment."""
    return CredentialStore(storage=storage, environ={})


@pytest.fixture
def settings() -> GenerationSettings:
    return GenerationSettings(timeout=5)


@pytest.fixture
def backends() -> list[StaticBackend]:
    return static_backends()


@pytest.fixture
def generation_client(credential_store: CredentialStore, backends: list[StaticBackend], settings: GenerationSettings) -> GenerationClient:
    return GenerationClient(credential_store=credential_store, backends=backends, settings=settings)


@pytest.fixture
def react_repository() -> Repository:
    return Repository(
        full_name="facebook/react",
        html_url="https://github.com/facebook/react",
        description="The library for web and native user interfaces.",
        homepage_url="https://react.dev",
        language="JavaScript",
        topics=["javascript", "react", "ui"],
        stats=RepositoryStats(stars=240000, forks=49000, open_issues=900, license="MIT License", default_branch="main"),
    )


def dump_for_snapshot(basemodel: BaseModel | None, /, exclude_none: bool = True, **dump_kwargs: Any) -> dict[str, Any] | None:
    if basemodel is None:
        return None

    return basemodel.model_dump(exclude_none=exclude_none, **dump_kwargs)


def dump_list_for_snapshot(basemodels: Sequence[BaseModel] | None, /, exclude_keys: list[str] | None = None) -> list[dict[str, Any]]:
    if basemodels is None:
        return []

    return [{key: value for key, value in item.model_dump().items() if key not in (exclude_keys or [])} for item in basemodels]


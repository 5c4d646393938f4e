from logging import Logger
from typing import Any

from fastmcp.exceptions import ToolError
from fastmcp.server import FastMCP
from fastmcp.tools import Tool
from fastmcp.utilities.logging import get_logger

from repo_scout.clients.errors.github import ClientError
from repo_scout.clients.github import RepositoryClient, parse_repository_url
from repo_scout.clients.models.github import Repository
from repo_scout.credentials.store import CredentialStore, mask_secret
from repo_scout.llm.backends.base import SchemaDescriptor
from repo_scout.llm.client import GenerationClient
from repo_scout.llm.errors import GenerationError
from repo_scout.llm.extract import extract_items, extract_model
from repo_scout.models.analysis import ProjectAnalysis, RepositoryInsights, SearchResult, SearchResults, SimilarTool, SimilarTools
from repo_scout.models.backend import Backend
from repo_scout.servers.prompts import analyze_repository_prompt, search_repositories_prompt, similar_tools_prompt
from repo_scout.servers.shared.annotations import (
    EXCLUDE_TOOLS,
    GEMINI_API_KEY,
    GROQ_API_KEY,
    OPENAI_API_KEY,
    PROJECT_NAME,
    QUERY,
    REPOSITORY_URL,
)
from repo_scout.servers.shared.errors import GenerationToolError, InvalidAnalysisError


class ExplorerServer:
    """Tools to search for repositories and analyze them with the configured LLM backend."""

    generation_client: GenerationClient
    repository_client: RepositoryClient
    logger: Logger

    def __init__(
        self,
        generation_client: GenerationClient,
        repository_client: RepositoryClient | None = None,
        logger: Logger | None = None,
    ):
        self.logger = logger or get_logger(name=__name__)
        self.generation_client = generation_client
        self.repository_client = repository_client or RepositoryClient()

    @property
    def credential_store(self) -> CredentialStore:
        return self.generation_client.credential_store

    def register_tools(self, fastmcp: FastMCP[Any], credential_tools: bool = True) -> FastMCP[Any]:
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.search_repositories))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.analyze_repository))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.find_similar_tools))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.get_readme))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.get_active_backend))

        if credential_tools:
            _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.get_api_keys))
            _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.set_api_keys))

        return fastmcp

    async def _generate(self, prompt: str, schema: SchemaDescriptor) -> str:
        try:
            return await self.generation_client.generate(prompt=prompt, schema=schema)
        except GenerationError as e:
            raise GenerationToolError(error=e) from e

    async def _get_repository(self, url: str) -> Repository:
        try:
            owner, repo = parse_repository_url(url)
            return await self.repository_client.get_repository(owner=owner, repo=repo)
        except ClientError as e:
            raise ToolError(str(e)) from e

    async def search_repositories(self, query: QUERY) -> list[SearchResult]:
        """Find popular public GitHub repositories related to a query."""

        self.logger.info(f"Searching repositories for {query!r}")

        response: str = await self._generate(prompt=search_repositories_prompt(query=query), schema=SearchResults)

        if (search_results := extract_items(response, "results", SearchResult)) is None:
            self.logger.warning(f"Search for {query!r} produced no usable results.")
            return []

        return search_results

    async def analyze_repository(self, url: REPOSITORY_URL) -> ProjectAnalysis:
        """Analyze a GitHub repository: its statistics, key features, tech stack, usage, code quality and similar tools."""

        repository: Repository = await self._get_repository(url=url)

        self.logger.info(f"Analyzing repository {repository.full_name}")

        response: str = await self._generate(prompt=analyze_repository_prompt(repository=repository), schema=RepositoryInsights)

        if not (insights := extract_model(response, RepositoryInsights)):
            raise InvalidAnalysisError

        return ProjectAnalysis(
            **insights.model_dump(),  # pyright: ignore[reportAny]
            project_name=repository.full_name,
            repo_url=repository.html_url,
            stats=repository.stats,
        )

    async def find_similar_tools(self, project_name: PROJECT_NAME, exclude: EXCLUDE_TOOLS) -> list[SimilarTool]:
        """Find more open-source tools similar to a project, skipping the ones already known."""

        response: str = await self._generate(prompt=similar_tools_prompt(project_name=project_name, exclude=exclude), schema=SimilarTools)

        if (similar_tools := extract_items(response, "tools", SimilarTool)) is None:
            return []

        excluded: set[str] = {name.strip().lower() for name in exclude}

        return [tool for tool in similar_tools if tool.name.strip().lower() not in excluded]

    async def get_readme(self, url: REPOSITORY_URL) -> str:
        """Get the full README of a GitHub repository."""

        try:
            owner, repo = parse_repository_url(url)
            return await self.repository_client.get_readme(owner=owner, repo=repo)
        except ClientError as e:
            raise ToolError(str(e)) from e

    def get_active_backend(self) -> Backend | None:
        """Get the LLM backend that will answer the next request, or null if no API key is configured."""

        return self.generation_client.active_backend()

    def get_api_keys(self) -> dict[str, str]:
        """Get the API keys configured in settings, masked for display."""

        return {backend.value: mask_secret(secret) for backend, secret in self.credential_store.read().items()}

    def set_api_keys(self, gemini: GEMINI_API_KEY = None, groq: GROQ_API_KEY = None, openai: OPENAI_API_KEY = None) -> Backend | None:
        """Save the API keys for the LLM backends. Returns the backend that will answer the next request."""

        if not any(key and key.strip() for key in (gemini, groq, openai)):
            msg = "Please enter at least one API key"
            raise ToolError(msg)

        self.credential_store.update({Backend.GEMINI: gemini, Backend.GROQ: groq, Backend.OPENAI: openai})

        return self.generation_client.active_backend()

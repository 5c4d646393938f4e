from logging import Logger
from pathlib import Path
from typing import Literal

import click
from fastmcp import FastMCP
from fastmcp.server.middleware.logging import LoggingMiddleware
from fastmcp.utilities.logging import get_logger

from repo_scout.clients.github import RepositoryClient
from repo_scout.credentials.storage import JsonFileStorage
from repo_scout.credentials.store import CredentialStore
from repo_scout.llm.client import GenerationClient
from repo_scout.servers.explorer import ExplorerServer
from repo_scout.settings import GenerationSettings, credential_tools_enabled, get_credentials_file

logger: Logger = get_logger(name=__name__)


def new_mcp_server(
    credential_store: CredentialStore | None = None,
    repository_client: RepositoryClient | None = None,
    settings: GenerationSettings | None = None,
) -> FastMCP[None]:
    if credential_store is None:
        credential_store = CredentialStore(storage=JsonFileStorage(path=get_credentials_file()))
        credential_store.load()

    generation_client: GenerationClient = GenerationClient(
        credential_store=credential_store,
        settings=settings or GenerationSettings.from_env(),
    )

    explorer_server: ExplorerServer = ExplorerServer(generation_client=generation_client, repository_client=repository_client)

    mcp: FastMCP[None] = FastMCP[None](
        name="Repo Scout",
        middleware=[LoggingMiddleware(include_payloads=True, logger=logger)],
    )

    _ = explorer_server.register_tools(fastmcp=mcp, credential_tools=credential_tools_enabled())

    if active_backend := generation_client.active_backend():
        logger.info(f"Repo Scout will generate with {active_backend.display_name}.")
    else:
        logger.warning("No API key configured. Set GEMINI_API_KEY, GROQ_API_KEY or OPENAI_API_KEY, or use the `set_api_keys` tool.")

    return mcp


@click.command()
@click.option(
    "--mcp-transport",
    type=click.Choice(["stdio", "streamable-http"]),
    default="stdio",
    help="The transport to run the MCP server on",
)
@click.option(
    "--credentials-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="The file API keys are stored in. Defaults to REPO_SCOUT_CREDENTIALS_FILE or ~/.repo-scout/credentials.json",
)
def run_mcp(mcp_transport: Literal["stdio", "streamable-http"], credentials_file: Path | None):
    credential_store = CredentialStore(storage=JsonFileStorage(path=credentials_file or get_credentials_file()))
    credential_store.load()

    mcp: FastMCP[None] = new_mcp_server(credential_store=credential_store)
    mcp.run(transport=mcp_transport)


if __name__ == "__main__":
    run_mcp()

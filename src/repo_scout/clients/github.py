import base64
import re
from collections.abc import Awaitable, Callable
from logging import Logger
from typing import Any

from fastmcp.utilities.logging import get_logger
from githubkit import GitHub as GitHubKit
from githubkit.auth import TokenAuthStrategy, UnauthAuthStrategy
from githubkit.exception import GitHubException as GitHubKitGitHubException
from githubkit.exception import RequestFailed as GitHubKitRequestFailed
from githubkit.response import Response as GitHubKitResponse
from githubkit.retry import RetryChainDecision, RetryRateLimit, RetryServerError
from githubkit.versions.v2022_11_28.models import ContentFile as GitHubKitContentFile
from githubkit.versions.v2022_11_28.models import FullRepository as GitHubKitFullRepository

from repo_scout.clients.errors.github import InvalidRepositoryUrlError, RequestError, ResourceNotFoundError
from repo_scout.clients.models.github import Repository
from repo_scout.settings import get_github_token

NOT_FOUND_ERROR = 404

REPOSITORY_NOT_FOUND_MESSAGE = "Repository not found on GitHub. Check the URL or if it's a private repository."
README_NOT_FOUND_MESSAGE = "README.md not found in this repository."

REPOSITORY_URL_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?(?:/.*)?$",
)

# `owner/repo` without a host
REPOSITORY_NAME_PATTERN = re.compile(r"^(?!(?:www\.)?github\.com/)(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?/?$")


def parse_repository_url(url: str) -> tuple[str, str]:
    """Split a GitHub repository URL (or `owner/repo`) into its owner and repository name."""

    url = url.strip()

    if not (match := REPOSITORY_URL_PATTERN.match(url) or REPOSITORY_NAME_PATTERN.match(url)):
        raise InvalidRepositoryUrlError(url=url)

    return match.group("owner"), match.group("repo")


def decode_content(content: str) -> str:
    return base64.b64decode(content).decode("utf-8")


def get_githubkit_client() -> GitHubKit[Any]:
    # Retry server errors up to 3 times
    retry_server_error = RetryServerError()

    # Retry rate limit errors up to 3 times
    retry_rate_limit = RetryRateLimit(max_retry=3)

    retry_chain = RetryChainDecision(
        retry_server_error,
        retry_rate_limit,
    )

    if token := get_github_token():
        return GitHubKit[TokenAuthStrategy](auth=TokenAuthStrategy(token=token), auto_retry=retry_chain)

    return GitHubKit[UnauthAuthStrategy](auth=UnauthAuthStrategy(), auto_retry=retry_chain)


class RepositoryClient:
    """Fetches repository statistics and README content from GitHub."""

    githubkit_client: GitHubKit[Any]
    logger: Logger

    def __init__(self, githubkit_client: GitHubKit[Any] | None = None, logger: Logger | None = None):
        self.githubkit_client = githubkit_client or get_githubkit_client()
        self.logger = logger or get_logger(name=__name__)

    async def _perform_rest_request[T](
        self,
        action: str,
        resource: str,
        not_found_message: str,
        *,
        method: Callable[..., Awaitable[GitHubKitResponse[T]]],
        **request_args: Any,  # pyright: ignore[reportAny]
    ) -> T:
        """Perform a request and extract the parsed response.

        Raises:
            ResourceNotFoundError: If the resource is not found.
            RequestError: If the request fails.
        """

        self.logger.info(f"Performing {action} for {resource}")

        try:
            response: GitHubKitResponse[T] = await method(**request_args)
        except GitHubKitRequestFailed as e:
            if e.response.status_code == NOT_FOUND_ERROR:
                raise ResourceNotFoundError(message=not_found_message, resource=resource) from e

            self.logger.exception(f"RequestFailed error performing {action} for {resource}: {e}")

            raise RequestError(action=action, message=str(e), status=e.response.status_code) from e
        except GitHubKitGitHubException as e:
            self.logger.exception(f"Error performing {action} for {resource}: {e}")

            raise RequestError(action=action, message=str(e)) from e

        return response.parsed_data

    async def get_repository(self, owner: str, repo: str) -> Repository:
        """Get a repository and its statistics."""

        full_repository: GitHubKitFullRepository = await self._perform_rest_request(
            action="Get repository",
            resource=f"{owner}/{repo}",
            not_found_message=REPOSITORY_NOT_FOUND_MESSAGE,
            method=self.githubkit_client.rest.repos.async_get,
            owner=owner,
            repo=repo,
        )

        return Repository.from_full_repository(full_repository=full_repository)

    async def get_readme(self, owner: str, repo: str) -> str:
        """Get the full content of the repository's README."""

        content_file: GitHubKitContentFile = await self._perform_rest_request(
            action="Get readme",
            resource=f"{owner}/{repo}",
            not_found_message=README_NOT_FOUND_MESSAGE,
            method=self.githubkit_client.rest.repos.async_get_readme,
            owner=owner,
            repo=repo,
        )

        return decode_content(content_file.content)

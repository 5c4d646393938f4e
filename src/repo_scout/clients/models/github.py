from typing import Self

from githubkit.versions.v2022_11_28.models import FullRepository as GitHubKitFullRepository
from pydantic import BaseModel, ConfigDict, Field

from repo_scout.models.analysis import RepositoryStats

NO_LICENSE = "N/A"


class Repository(BaseModel):
    """A repository and its statistics, as reported by GitHub."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    full_name: str = Field(description="The owner and name of the repository, e.g. `facebook/react`.")
    html_url: str = Field(description="The URL of the repository on GitHub.")
    description: str | None = Field(default=None, description="The description of the repository.")
    homepage_url: str | None = Field(default=None, description="The homepage URL of the repository.")
    language: str | None = Field(default=None, description="The primary language of the repository.")
    topics: list[str] = Field(default_factory=list, description="The topics of the repository.")
    archived: bool = Field(default=False, description="Whether the repository is archived.")
    stats: RepositoryStats = Field(description="The statistics of the repository.")

    @classmethod
    def from_full_repository(cls, full_repository: GitHubKitFullRepository) -> Self:
        stats = RepositoryStats(
            stars=full_repository.stargazers_count,
            forks=full_repository.forks_count,
            open_issues=full_repository.open_issues_count,
            license=full_repository.license_.name if full_repository.license_ else NO_LICENSE,
            default_branch=full_repository.default_branch,
        )

        return cls(
            full_name=full_repository.full_name,
            html_url=full_repository.html_url,
            description=full_repository.description,
            homepage_url=full_repository.homepage or None,
            language=full_repository.language,
            topics=full_repository.topics or [],
            archived=full_repository.archived,
            stats=stats,
        )

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """A model exchanged with an LLM, using the camelCase keys the prompts ask for."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchResult(CamelModel):
    """A repository found for a search query."""

    name: str = Field(description="The owner and name of the repository, e.g. 'facebook/react'.")
    url: str = Field(description="The full .git URL of the repository.")
    description: str = Field(default="", description="A one-sentence summary of the repository.")


class SearchResults(CamelModel):
    """The answer to a repository search."""

    results: list[SearchResult] = Field(default_factory=list)


class SimilarTool(CamelModel):
    """An open-source alternative to a repository."""

    name: str
    description: str = ""
    url: str = ""


class SimilarTools(CamelModel):
    """The answer to a similar tools request."""

    tools: list[SimilarTool] = Field(default_factory=list)


class CodeQuality(CamelModel):
    """An assessment of a repository's code."""

    quality_score: float = Field(default=0, description="A score from 0-100 for overall code quality.")
    maintainability_score: float = Field(default=0, description="A score from 0-100 for code maintainability.")
    strengths: list[str] = Field(default_factory=list, description="An array of positive aspects of the codebase.")
    areas_for_improvement: list[str] = Field(default_factory=list, description="An array of actionable suggestions for improvement.")


class RepositoryInsights(CamelModel):
    """The qualitative analysis of a repository, produced by an LLM."""

    description: str | None = Field(default=None, description="A concise, one-paragraph summary of the project.")
    key_features: list[str] = Field(default_factory=list, description="An array of the most important features or capabilities.")
    tech_stack: list[str] = Field(default_factory=list, description="An array of key technologies, languages, and frameworks used.")
    usage_instructions: str | None = Field(
        default=None, description="A string containing simplified setup and basic usage commands, formatted for a terminal."
    )
    readme_content: str | None = Field(
        default=None, description="A comprehensive summary of the README.md file, preserving markdown formatting."
    )
    live_demo_url: str | None = Field(default=None, description="The URL of a live demo of the project, if there is one.")
    similar_tools: list[SimilarTool] = Field(default_factory=list, description="An array of objects for 3 similar or alternative tools.")
    code_quality: CodeQuality | None = Field(default=None)


class RepositoryStats(BaseModel):
    """The statistics of a repository."""

    stars: int
    forks: int
    open_issues: int
    license: str
    default_branch: str


class ProjectAnalysis(RepositoryInsights):
    """The full analysis of a repository: GitHub facts merged with the LLM's insights."""

    project_name: str
    repo_url: str
    stats: RepositoryStats

from collections.abc import Sequence

import yaml

from repo_scout.clients.models.github import Repository

SEARCH_RESULTS_LIMIT = 5
SIMILAR_TOOLS_LIMIT = 3


def search_repositories_prompt(query: str) -> str:
    return (
        f'Find {SEARCH_RESULTS_LIMIT} relevant and popular public GitHub repositories related to the query: "{query}". '
        'Return ONLY a raw JSON object with a "results" key containing an array of objects. '
        "Each object must have \"name\" (e.g., 'facebook/react'), \"url\" (the full .git URL), "
        'and "description" (a one-sentence summary).'
    )


def analyze_repository_prompt(repository: Repository) -> str:
    metadata: str = yaml.safe_dump(
        repository.model_dump(include={"description", "homepage_url", "language", "topics", "archived"}),
        sort_keys=False,
        indent=1,
        width=400,
    )

    return f"""Perform a deep analysis of the GitHub repository: {repository.full_name} ({repository.html_url}).
Based on its public information, generate a comprehensive overview.
Do NOT include project name, URL, or stats like stars, forks, issues, or license. I already have that data.
For similarTools, provide exactly {SIMILAR_TOOLS_LIMIT} relevant alternatives.

Use camelCase keys: description, keyFeatures, techStack, usageInstructions, readmeContent, liveDemoUrl,
similarTools (objects with name, description and url) and codeQuality (an object with qualityScore,
maintainabilityScore, strengths and areasForImprovement).

The repository metadata reported by GitHub is:
{metadata}"""


def similar_tools_prompt(project_name: str, exclude: Sequence[str]) -> str:
    return (
        f"Find {SIMILAR_TOOLS_LIMIT} more open-source tools similar to {project_name}. "
        f"Do not include any of these already listed tools: {', '.join(exclude)}. "
        "Provide a brief, one-sentence description for each. "
        'Return ONLY a raw JSON object with a "tools" key containing an array of objects. '
        'Each object must have "name", "description", and "url".'
    )

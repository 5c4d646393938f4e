from typing import Annotated

from pydantic import Field

QUERY = Annotated[str, Field(description="What to look for, e.g. `python web framework` or `terminal file manager`.")]

REPOSITORY_URL = Annotated[
    str, Field(description="The URL of the GitHub repository, e.g. `https://github.com/facebook/react`, or `owner/repo`.")
]

PROJECT_NAME = Annotated[str, Field(description="The name of the project to find alternatives for, e.g. `facebook/react`.")]
EXCLUDE_TOOLS = Annotated[list[str], Field(description="The names of tools that are already known and must not be suggested again.")]

API_KEY_DESCRIPTION = "Leave empty to remove the stored key."
GEMINI_API_KEY = Annotated[str | None, Field(description=f"The Google Gemini API key. {API_KEY_DESCRIPTION}")]
GROQ_API_KEY = Annotated[str | None, Field(description=f"The Groq API key. {API_KEY_DESCRIPTION}")]
OPENAI_API_KEY = Annotated[str | None, Field(description=f"The OpenAI API key. {API_KEY_DESCRIPTION}")]

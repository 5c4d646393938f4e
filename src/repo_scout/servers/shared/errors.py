from fastmcp.exceptions import ToolError

from repo_scout.llm.errors import GenerationError, describe_error

INVALID_ANALYSIS_MESSAGE = "The AI returned an invalid analysis format. Please try again."


class GenerationToolError(ToolError):
    """A generation failure, reported to the client with guidance for the user."""

    def __init__(self, error: GenerationError):
        super().__init__(describe_error(error))
        self.code: str = error.code.value


class InvalidAnalysisError(ToolError):
    """The LLM's analysis could not be parsed."""

    def __init__(self):
        super().__init__(INVALID_ANALYSIS_MESSAGE)

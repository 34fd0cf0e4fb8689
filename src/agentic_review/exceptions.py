"""Agentic Review custom exceptions."""


class AgenticReviewError(Exception):
    """Base exception for Agentic Review."""

    pass


class ConfigError(AgenticReviewError):
    """Configuration error."""

    pass


class RepositoryError(AgenticReviewError):
    """Repository fetch error."""

    pass


class InvalidRepoUrl(RepositoryError):
    """URL is not a https://github.com/<owner>/<repo> URL."""

    pass


class BranchNotFound(RepositoryError):
    """Branch lookup returned a non-success status."""

    pass


class TreeFetchFailed(RepositoryError):
    """Recursive tree listing failed."""

    pass


class NoProcessableFiles(RepositoryError):
    """No file survived filtering or no file body could be retrieved."""

    pass


class FileFetchPartialFailure(RepositoryError):
    """A single file could not be retrieved. Logged, never raised to callers."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not fetch content for {path}: {reason}")
        self.path = path
        self.reason = reason


class GenerationError(AgenticReviewError):
    """LLM generation error."""

    pass


class UnknownAgentRole(GenerationError):
    """No prompt template exists for the requested agent."""

    pass


class InvalidResponseFormat(GenerationError):
    """Model response could not be decoded into the expected shape."""

    def __init__(self, message: str, raw_text: str | None = None):
        super().__init__(message)
        self.raw_text = raw_text


class GenerationServiceFailure(GenerationError):
    """Gemini API call failed or returned nothing."""

    pass


class WorkflowError(AgenticReviewError):
    """Workflow orchestration error."""

    pass


class UnknownWorkflowFailure(WorkflowError):
    """Wraps any unexpected exception raised during a review."""

    pass

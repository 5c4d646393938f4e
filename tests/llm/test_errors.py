import pytest
from inline_snapshot import snapshot

from repo_scout.llm.errors import (
    NO_CREDENTIAL_MESSAGE,
    BackendError,
    ErrorCode,
    GenerationError,
    GenerationTimeoutError,
    NoCredentialError,
    classify_status,
    describe_error,
)
from repo_scout.models.backend import Backend


@pytest.mark.parametrize(
    ("status", "code"),
    [
        (401, ErrorCode.AUTH),
        (403, ErrorCode.AUTH),
        (429, ErrorCode.QUOTA),
        (400, ErrorCode.BAD_REQUEST),
        (404, ErrorCode.BAD_REQUEST),
        (500, ErrorCode.SERVER),
        (503, ErrorCode.SERVER),
        (None, ErrorCode.UNKNOWN),
    ],
)
def test_classify_status(status: int | None, code: ErrorCode):
    assert classify_status(status) == code


def test_no_credential_error():
    error = NoCredentialError()

    assert str(error) == NO_CREDENTIAL_MESSAGE
    assert error.code == ErrorCode.NO_CREDENTIAL
    assert error.backend is None


class TestBackendError:
    def test_with_message(self):
        error = BackendError(backend=Backend.GROQ, message="Invalid API Key", status=401)

        assert str(error) == snapshot("Groq API error (401): Invalid API Key")
        assert error.code == ErrorCode.AUTH
        assert error.status == 401
        assert error.detail == "Invalid API Key"

    def test_without_message(self):
        error = BackendError(backend=Backend.OPENAI, status=500)

        assert str(error) == snapshot("OpenAI API error (500): Internal Server Error")
        assert error.code == ErrorCode.SERVER

    def test_without_status(self):
        error = BackendError(backend=Backend.GEMINI, message="Connection refused", code=ErrorCode.TRANSPORT)

        assert str(error) == snapshot("Gemini API error: Connection refused")
        assert error.code == ErrorCode.TRANSPORT
        assert error.status is None

    def test_unknown_status(self):
        assert str(BackendError(backend=Backend.GROQ, status=498)) == snapshot("Groq API error (498): HTTP 498")


class TestFromBackendFailure:
    def test_wraps_backend_error(self):
        error = GenerationError.from_backend_failure(
            backend=Backend.GROQ, error=BackendError(backend=Backend.GROQ, message="Invalid API Key", status=401)
        )

        assert str(error) == snapshot("groq API error: Groq API error (401): Invalid API Key")
        assert error.code == ErrorCode.AUTH
        assert error.status == 401
        assert error.backend == Backend.GROQ

    def test_wraps_unexpected_error(self):
        error = GenerationError.from_backend_failure(backend=Backend.OPENAI, error=ValueError("boom"))

        assert str(error) == snapshot("openai API error: boom")
        assert error.code == ErrorCode.UNKNOWN

    def test_wraps_error_without_message(self):
        error = GenerationError.from_backend_failure(backend=Backend.GEMINI, error=RuntimeError())

        assert str(error) == snapshot("gemini API error: RuntimeError")


def test_timeout_error():
    error = GenerationTimeoutError(backend=Backend.GEMINI, timeout=0.5)

    assert str(error) == snapshot("gemini API error: Request timed out after 0.5 seconds")
    assert error.code == ErrorCode.TIMEOUT
    assert error.timeout == 0.5


class TestDescribeError:
    def test_no_credential(self):
        assert describe_error(NoCredentialError()) == NO_CREDENTIAL_MESSAGE

    def test_auth(self):
        error = BackendError(backend=Backend.GROQ, message="Invalid API Key", status=401)

        assert describe_error(error) == snapshot(
            "Groq API error (401): Invalid API Key The API key was rejected. Check that it is valid and has not expired, then update it in settings."
        )

    def test_quota(self):
        error = BackendError(backend=Backend.GEMINI, message="Resource has been exhausted", status=429)

        assert describe_error(error).endswith("configure a key for another provider.")

    def test_unknown(self):
        error = GenerationError(message="openai API error: boom")

        assert describe_error(error) == "openai API error: boom"

from enum import StrEnum
from http import HTTPStatus

from repo_scout.models.backend import Backend

NO_CREDENTIAL_MESSAGE = "No API key configured. Please configure at least one API key in settings."


class ErrorCode(StrEnum):
    """A structured classification of a generation failure."""

    NO_CREDENTIAL = "no_credential"
    AUTH = "auth"
    QUOTA = "quota"
    BAD_REQUEST = "bad_request"
    SERVER = "server"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    EMPTY_RESPONSE = "empty_response"
    UNKNOWN = "unknown"


def classify_status(status: int | None) -> ErrorCode:
    if status is None:
        return ErrorCode.UNKNOWN

    if status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
        return ErrorCode.AUTH

    if status == HTTPStatus.TOO_MANY_REQUESTS:
        return ErrorCode.QUOTA

    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return ErrorCode.SERVER

    if status >= HTTPStatus.BAD_REQUEST:
        return ErrorCode.BAD_REQUEST

    return ErrorCode.UNKNOWN


def status_description(status: int) -> str:
    """A generic description of an HTTP status, used when the response body has no message."""

    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"HTTP {status}"


class GenerationError(Exception):
    """A generation error from the Repo Scout LLM client."""

    code: ErrorCode
    backend: Backend | None
    status: int | None

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        backend: Backend | None = None,
        status: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.backend = backend
        self.status = status

    @property
    def message(self) -> str:
        return str(self)

    @classmethod
    def from_backend_failure(cls, backend: Backend, error: Exception) -> "GenerationError":
        """Wrap a failure raised while calling a backend, prefixing the backend name."""

        code: ErrorCode = error.code if isinstance(error, GenerationError) else ErrorCode.UNKNOWN
        status: int | None = error.status if isinstance(error, GenerationError) else None
        detail: str = str(error) or type(error).__name__

        return cls(message=f"{backend.value} API error: {detail}", code=code, backend=backend, status=status)


class NoCredentialError(GenerationError):
    """No backend has a credential configured."""

    def __init__(self):
        super().__init__(message=NO_CREDENTIAL_MESSAGE, code=ErrorCode.NO_CREDENTIAL)


class BackendError(GenerationError):
    """A configured backend rejected or failed the call."""

    def __init__(self, backend: Backend, message: str | None = None, status: int | None = None, code: ErrorCode | None = None):
        detail: str = message or (status_description(status) if status is not None else "Unknown error")

        if status is not None:
            msg = f"{backend.display_name} API error ({status}): {detail}"
        else:
            msg = f"{backend.display_name} API error: {detail}"

        super().__init__(message=msg, code=code or classify_status(status), backend=backend, status=status)
        self.detail: str = detail


class GenerationTimeoutError(GenerationError):
    """A backend did not answer before the call deadline."""

    def __init__(self, backend: Backend, timeout: float):
        super().__init__(
            message=f"{backend.value} API error: Request timed out after {timeout} seconds",
            code=ErrorCode.TIMEOUT,
            backend=backend,
        )
        self.timeout: float = timeout


USER_HINTS: dict[ErrorCode, str] = {
    ErrorCode.AUTH: "The API key was rejected. Check that it is valid and has not expired, then update it in settings.",
    ErrorCode.QUOTA: "The API quota for this key has been exceeded. Wait a moment or configure a key for another provider.",
    ErrorCode.BAD_REQUEST: "The provider could not process the request. Try rephrasing it.",
    ErrorCode.SERVER: "The provider is having problems right now. Please try again later.",
    ErrorCode.TRANSPORT: "The provider could not be reached. Check your network connection.",
    ErrorCode.TIMEOUT: "The provider took too long to answer. Please try again.",
    ErrorCode.EMPTY_RESPONSE: "The provider returned an empty answer. Please try again.",
}


def describe_error(error: GenerationError) -> str:
    """A readable message for an end user, with guidance keyed by the error code."""

    if error.code == ErrorCode.NO_CREDENTIAL:
        return str(error)

    if hint := USER_HINTS.get(error.code):
        return f"{error} {hint}"

    return str(error)

ExtraInfoType = dict[str, str | None]


class ClientError(Exception):
    """A request error from the Repo Scout GitHub client."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class InvalidRepositoryUrlError(ClientError):
    """The URL does not point to a GitHub repository."""

    def __init__(self, url: str):
        super().__init__(message="Invalid GitHub repository URL.", extra_info={"url": url})


class RequestError(ClientError):
    """A request to GitHub failed."""

    def __init__(self, action: str, message: str | None = None, status: int | None = None):
        super().__init__(
            message=f"Failed to fetch data from GitHub API (Status: {status})." if status else "A request error occured.",
            extra_info={"action": action, "message": message},
        )
        self.status: int | None = status


class ResourceNotFoundError(ClientError):
    """The requested GitHub resource does not exist or is not public."""

    def __init__(self, message: str, resource: str | None = None):
        super().__init__(message=message, extra_info={"resource": resource})

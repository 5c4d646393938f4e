import os
from collections.abc import Mapping
from logging import Logger

from fastmcp.utilities.logging import get_logger

from repo_scout.credentials.storage import KeyValueStorage, StorageError
from repo_scout.models.backend import Backend, parse_backend

CredentialSet = dict[Backend, str]

ENVIRONMENT_VARIABLES: dict[Backend, tuple[str, ...]] = {
    Backend.GEMINI: ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    Backend.GROQ: ("GROQ_API_KEY",),
    Backend.OPENAI: ("OPENAI_API_KEY",),
}


def normalize_secret(value: str | None) -> str | None:
    """Return the trimmed secret, or None if nothing is left after trimming."""

    if value is None:
        return None

    return value.strip() or None


def mask_secret(secret: str, visible: int = 4) -> str:
    """Mask a secret for display, keeping only its last few characters."""

    if len(secret) <= visible * 2:
        return "*" * len(secret)

    return "*" * (len(secret) - visible) + secret[-visible:]


class CredentialStore:
    """The single source of truth for which backends are usable.

    User supplied secrets are kept in memory and mirrored to a persistent storage. Secrets
    found in the process environment act as deployment defaults and never override a user
    supplied secret."""

    storage: KeyValueStorage | None
    environ: Mapping[str, str]
    logger: Logger

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        environ: Mapping[str, str] | None = None,
        logger: Logger | None = None,
    ):
        self.storage = storage
        self.environ = environ if environ is not None else os.environ
        self.logger = logger or get_logger(name=__name__)
        self._credentials: CredentialSet = {}

    def load(self) -> None:
        """Replace the in-memory credentials with the persisted ones."""

        if self.storage is None:
            self.logger.debug("No persistent storage is available, credentials will only be kept in memory.")
            return

        credentials: CredentialSet = {}

        for backend in Backend:
            try:
                secret = normalize_secret(self.storage.get(backend.storage_key))
            except StorageError as e:
                self.logger.warning(f"Failed to load the credential for {backend.value}: {e}")
                continue

            if secret:
                credentials[backend] = secret

        self._credentials = credentials

        self.logger.info(f"Loaded credentials for {len(credentials)} backend(s): {', '.join(backend.value for backend in credentials)}")

    def update(self, credentials: Mapping[Backend | str, str | None]) -> None:
        """Set or clear the credentials of the backends mentioned in `credentials`.

        A non-empty value is trimmed and stored, an empty or missing value clears the backend.
        Backends that are not mentioned are left untouched. Persistence failures are logged
        and the in-memory credentials are updated regardless."""

        if self.storage is None:
            self.logger.warning("No persistent storage is available, credential changes will not survive a restart.")

        for backend_name, value in credentials.items():
            if not (backend := parse_backend(backend_name)):
                self.logger.warning(f"Ignoring credential for unknown backend {backend_name!r}")
                continue

            if secret := normalize_secret(value):
                self._credentials[backend] = secret
                self._persist(backend=backend, secret=secret)
            else:
                _ = self._credentials.pop(backend, None)
                self._persist(backend=backend, secret=None)

    def _persist(self, backend: Backend, secret: str | None) -> None:
        if self.storage is None:
            return

        try:
            if secret is None:
                self.storage.delete(backend.storage_key)
            else:
                self.storage.set(backend.storage_key, secret)
        except StorageError as e:
            self.logger.error(f"Failed to persist the credential for {backend.value}: {e}")

    def read(self) -> CredentialSet:
        """Return a copy of the user supplied credentials, reloading them if none are held."""

        if not self._credentials:
            self.load()

        return dict(self._credentials)

    def resolve(self, backend: Backend) -> str | None:
        """Return the secret for a backend, preferring the user supplied one over the environment."""

        if secret := self._credentials.get(backend):
            return secret

        for env_var in ENVIRONMENT_VARIABLES[backend]:
            if secret := normalize_secret(self.environ.get(env_var)):
                return secret

        return None

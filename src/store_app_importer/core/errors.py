"""
Importer error taxonomy.

Every stage of the import pipeline raises a subclass of ImporterError. The
orchestrator catches them per application and records the kind, together
with the stage it was running, in the ImportResult. One failing application
never aborts the batch.
"""


class ImporterError(Exception):
    """Base exception for all import pipeline failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidInput(ImporterError):
    """Malformed application descriptor or manifest data."""


class ManifestNotFound(ImporterError):
    """The store catalog has no manifest (or no versions) for the package."""


class UpstreamUnavailable(ImporterError):
    """A store service errored or returned an unreadable response."""


class IconNotFound(ImporterError):
    """The product-details record has no icon URL."""


class DownloadFailed(ImporterError):
    """Downloading the icon bytes failed."""


class BackendError(ImporterError):
    """
    Non-2xx response from the management backend.

    Attributes:
        status_code: HTTP status code
        body: Raw error body returned by the backend
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        detail = f"[{status_code}] {message}" if status_code is not None else message
        if body:
            detail = f"{detail}: {body}"
        super().__init__(detail)


class ImportRejected(BackendError):
    """The backend refused to create the application."""


class ImportTimedOut(ImporterError):
    """The created application did not reach the published state in time."""


class AssignmentRejected(BackendError):
    """The backend refused the assignment set."""


class AuthenticationFailed(ImporterError):
    """Token acquisition against the identity provider failed."""

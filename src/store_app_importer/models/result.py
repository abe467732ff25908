"""
Import outcome models.

Tracks the per-application state machine and the terminal ImportResult the
orchestrator produces for every input application.
"""

from dataclasses import asdict, dataclass
from enum import Enum


class ImportStage(Enum):
    """Pipeline stage an error is attributed to."""

    MANIFEST = "manifest"
    ICON = "icon"
    BUILD = "build"
    CREATE = "create"
    ASSIGN = "assign"


class ImportState(Enum):
    """State of one application's import."""

    CREATED = "created"
    METADATA_RESOLVED = "metadataResolved"
    ICON_RESOLVED = "iconResolved"
    DESCRIPTOR_BUILT = "descriptorBuilt"
    BACKEND_CREATED = "backendCreated"
    ASSIGNED = "assigned"
    ASSIGNMENT_FAILED = "assignmentFailed"
    MANIFEST_FAILED = "manifestFailed"
    ICON_FAILED = "iconFailed"
    BUILD_FAILED = "buildFailed"
    CREATE_FAILED = "createFailed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    @classmethod
    def failed_at(cls, stage: ImportStage) -> "ImportState":
        return FAILED_STATES[stage]


FAILED_STATES = {
    ImportStage.MANIFEST: ImportState.MANIFEST_FAILED,
    ImportStage.ICON: ImportState.ICON_FAILED,
    ImportStage.BUILD: ImportState.BUILD_FAILED,
    ImportStage.CREATE: ImportState.CREATE_FAILED,
    ImportStage.ASSIGN: ImportState.ASSIGNMENT_FAILED,
}

TERMINAL_STATES = frozenset({ImportState.ASSIGNED, *FAILED_STATES.values()})


@dataclass
class ImportResult:
    """Outcome of importing one application."""

    package_identifier: str
    state: ImportState = ImportState.CREATED
    application_id: str | None = None
    assignments_submitted: int = 0
    assignments_dropped: int = 0
    stage: ImportStage | None = None
    error_kind: str | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is ImportState.ASSIGNED

    def fail(self, stage: ImportStage, error_kind: str, message: str) -> None:
        """Move to the failed state of ``stage``."""
        self.state = ImportState.failed_at(stage)
        self.stage = stage
        self.error_kind = error_kind
        self.message = message

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict (handling enums)."""
        data = asdict(self)
        data["state"] = self.state.value
        data["stage"] = self.stage.value if self.stage else None
        return data

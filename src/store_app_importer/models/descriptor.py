"""
Input models — applications to import and their assignment intents.

Descriptors are supplied by the caller (usually parsed from a JSON apps file)
and are read-only to the import pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum

from store_app_importer.core.errors import InvalidInput


class TargetType(Enum):
    """Assignment target discriminant as written in the apps file."""

    GROUP = "group"
    ALL_DEVICES = "allDevices"
    ALL_LICENSED_USERS = "allLicensedUsers"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "TargetType":
        for member in cls:
            if member.value == value and member is not cls.OTHER:
                return member
        return cls.OTHER


class InstallIntent(Enum):
    """Install intent of an assignment."""

    REQUIRED = "required"
    AVAILABLE = "available"
    UNINSTALL = "uninstall"


@dataclass(frozen=True)
class AssignmentIntent:
    """One desired assignment for an application."""

    target_type: TargetType
    intent: InstallIntent
    group_id: str | None = None
    raw_target_type: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "AssignmentIntent":
        """Deserialize from an apps-file assignment entry."""
        if not isinstance(data, dict):
            raise InvalidInput(f"Assignment must be an object, got {type(data).__name__}")

        raw_target = str(data.get("targetType", ""))
        try:
            intent = InstallIntent(data.get("intent"))
        except ValueError:
            raise InvalidInput(f"Unknown assignment intent: {data.get('intent')!r}") from None

        target_type = TargetType.parse(raw_target)
        group_id = data.get("groupId")
        if target_type is TargetType.GROUP and not group_id:
            raise InvalidInput("Group assignment requires a groupId")

        return cls(
            target_type=target_type,
            intent=intent,
            group_id=group_id,
            raw_target_type=raw_target,
        )


@dataclass(frozen=True)
class AppDescriptor:
    """One application to import from the store."""

    package_identifier: str
    is_featured: bool = False
    assignments: tuple[AssignmentIntent, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict) -> "AppDescriptor":
        """Deserialize from an apps-file entry."""
        if not isinstance(data, dict):
            raise InvalidInput(f"Application entry must be an object, got {type(data).__name__}")

        package_identifier = str(data.get("packageIdentifier") or "").strip()
        if not package_identifier:
            raise InvalidInput("Application entry is missing packageIdentifier")

        assignments = data.get("assignments") or []
        if not isinstance(assignments, list):
            raise InvalidInput(f"{package_identifier}: assignments must be a list")

        return cls(
            package_identifier=package_identifier,
            is_featured=bool(data.get("isFeatured", False)),
            assignments=tuple(AssignmentIntent.from_dict(a) for a in assignments),
        )


def load_descriptors(data) -> list[AppDescriptor]:
    """
    Parse the loaded contents of an apps file.

    Accepts either a bare list of application entries or an object with an
    ``apps`` list.

    Raises:
        InvalidInput: If the document or any entry is malformed.
    """
    if isinstance(data, dict):
        data = data.get("apps")
    if not isinstance(data, list):
        raise InvalidInput("Apps file must contain a list of applications")
    return [AppDescriptor.from_dict(entry) for entry in data]

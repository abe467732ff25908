"""
Backend resource models — typed payloads for the device-management API.

Construction (see core.builder and core.assignments) is kept separate from
serialization: every type here only knows how to render itself as the JSON
body the backend expects.
"""

from dataclasses import dataclass, field

from store_app_importer.models.manifest import IconAsset

REPOSITORY_TYPE = "microsoftStore"
NOTIFICATIONS_POLICY = "hideAll"

WINGET_APP_TYPE = "#microsoft.graph.winGetApp"
MIME_CONTENT_TYPE = "#microsoft.graph.mimeContent"
INSTALL_EXPERIENCE_TYPE = "microsoft.graph.winGetAppInstallExperience"
ASSIGNMENT_TYPE = "#microsoft.graph.mobileAppAssignment"
ASSIGNMENT_SETTINGS_TYPE = "#microsoft.graph.winGetAppAssignmentSettings"


@dataclass(frozen=True)
class BackendAppDescriptor:
    """Application resource payload for a store-sourced app."""

    display_name: str
    developer: str
    publisher: str
    description: str
    icon: IconAsset
    run_as_account: str
    package_identifier: str
    is_featured: bool = False
    information_url: str | None = None
    privacy_information_url: str | None = None
    repository_type: str = REPOSITORY_TYPE
    role_scope_tag_ids: tuple[str, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        """Serialize to the backend's create-app JSON body."""
        payload = {
            "@odata.type": WINGET_APP_TYPE,
            "displayName": self.display_name,
            "description": self.description,
            "publisher": self.publisher,
            "developer": self.developer,
            "isFeatured": self.is_featured,
            "largeIcon": {
                "@odata.type": MIME_CONTENT_TYPE,
                "type": self.icon.mime_type,
                "value": self.icon.encoded(),
            },
            "roleScopeTagIds": list(self.role_scope_tag_ids),
            "repositoryType": self.repository_type,
            "packageIdentifier": self.package_identifier,
            "installExperience": {
                "@odata.type": INSTALL_EXPERIENCE_TYPE,
                "runAsAccount": self.run_as_account,
            },
        }
        # Absent URLs are not submitted at all
        if self.information_url is not None:
            payload["informationUrl"] = self.information_url
        if self.privacy_information_url is not None:
            payload["privacyInformationUrl"] = self.privacy_information_url
        return payload


# ──────────────────────────────────────────────
# Assignment targets
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class GroupTarget:
    group_id: str

    def to_payload(self) -> dict:
        return {"@odata.type": "#microsoft.graph.groupAssignmentTarget", "groupId": self.group_id}


@dataclass(frozen=True)
class AllDevicesTarget:
    def to_payload(self) -> dict:
        return {"@odata.type": "#microsoft.graph.allDevicesAssignmentTarget"}


@dataclass(frozen=True)
class AllLicensedUsersTarget:
    def to_payload(self) -> dict:
        return {"@odata.type": "#microsoft.graph.allLicensedUsersAssignmentTarget"}


@dataclass(frozen=True)
class UnrecognizedTarget:
    """A target type with no backend shape. Never submitted."""

    raw_type: str


AssignmentTarget = GroupTarget | AllDevicesTarget | AllLicensedUsersTarget


@dataclass(frozen=True)
class BackendAssignment:
    """Assignment record with the fixed notification-suppression settings."""

    intent: str
    target: AssignmentTarget

    def to_payload(self) -> dict:
        return {
            "@odata.type": ASSIGNMENT_TYPE,
            "intent": self.intent,
            "target": self.target.to_payload(),
            "settings": {
                "@odata.type": ASSIGNMENT_SETTINGS_TYPE,
                "notifications": NOTIFICATIONS_POLICY,
                "installTimeSettings": None,
                "restartSettings": None,
            },
        }


def assignment_set_payload(assignments: list[BackendAssignment]) -> dict:
    """Body of the assignment-replace call for one application."""
    return {"mobileAppAssignments": [a.to_payload() for a in assignments]}

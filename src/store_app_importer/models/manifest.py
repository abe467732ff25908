"""
Store catalog models — package manifests, installers, and product icons.

These are fetched fresh for every import and discarded once the backend
descriptor has been built.
"""

import base64
from dataclasses import dataclass, field

from store_app_importer.core.errors import ManifestNotFound, UpstreamUnavailable

ICON_MIME_TYPE = "image/png"


def _text(block: dict, key: str) -> str | None:
    """String value of a locale field, None when missing or not a string."""
    value = block.get(key)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class Installer:
    """One install variant of a package version."""

    scope: str  # "user" or "system"
    architecture: str | None = None
    installer_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Installer":
        return cls(
            scope=str(data.get("Scope") or "").lower(),
            architecture=data.get("Architecture"),
            installer_type=data.get("InstallerType"),
        )


@dataclass(frozen=True)
class PackageManifest:
    """
    Store catalog truth for a package.

    Metadata comes from the default locale of the latest version, which is
    the last entry of the catalog's version list.
    """

    package_identifier: str
    package_name: str
    publisher: str
    short_description: str = ""
    support_url: str | None = None
    privacy_url: str | None = None
    installers: tuple[Installer, ...] = field(default_factory=tuple)
    versions: tuple[str, ...] = field(default_factory=tuple)

    @property
    def latest_version(self) -> str:
        return self.versions[-1]

    @classmethod
    def from_catalog(cls, data: dict, requested_identifier: str) -> "PackageManifest":
        """
        Build a manifest from the catalog's ``Data`` block.

        Raises:
            ManifestNotFound: If the catalog lists no versions.
            UpstreamUnavailable: If the block does not have the catalog's shape.
        """
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"Malformed manifest for {requested_identifier}")

        versions = data.get("Versions") or []
        if not isinstance(versions, list):
            raise UpstreamUnavailable(f"Malformed version list for {requested_identifier}")
        if not versions:
            raise ManifestNotFound(f"No versions published for {requested_identifier}")
        if not all(isinstance(v, dict) for v in versions):
            raise UpstreamUnavailable(f"Malformed version entry for {requested_identifier}")

        latest = versions[-1]
        locale = latest.get("DefaultLocale") or {}
        installers = latest.get("Installers") or []
        if not isinstance(locale, dict) or not isinstance(installers, list):
            raise UpstreamUnavailable(f"Malformed latest version for {requested_identifier}")
        if not all(isinstance(i, dict) for i in installers):
            raise UpstreamUnavailable(f"Malformed installer entry for {requested_identifier}")
        return cls(
            package_identifier=data.get("PackageIdentifier") or requested_identifier,
            package_name=_text(locale, "PackageName") or "",
            publisher=_text(locale, "Publisher") or "",
            short_description=_text(locale, "ShortDescription") or "",
            support_url=_text(locale, "PublisherSupportUrl"),
            privacy_url=_text(locale, "PrivacyUrl"),
            installers=tuple(Installer.from_dict(i) for i in installers),
            versions=tuple(str(v.get("PackageVersion", "")) for v in versions),
        )


@dataclass(frozen=True)
class IconAsset:
    """Product icon bytes, always declared as PNG to the backend."""

    source_url: str
    content: bytes
    mime_type: str = ICON_MIME_TYPE

    def encoded(self) -> str:
        """Base64 text suitable for embedding in a JSON payload."""
        return base64.b64encode(self.content).decode("ascii")

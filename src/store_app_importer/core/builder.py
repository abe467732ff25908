"""
Backend descriptor construction.

Pure translation from an input descriptor, a resolved manifest, and an icon
into the backend's application schema. No I/O.
"""

import re

from store_app_importer.core.errors import InvalidInput
from store_app_importer.models.backend import BackendAppDescriptor
from store_app_importer.models.descriptor import AppDescriptor
from store_app_importer.models.manifest import IconAsset, PackageManifest

SECURE_SCHEME = "https://"
SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def normalize_url(value: str | None) -> str | None:
    """
    Normalize a manifest-supplied URL.

    'example.com/help'         -> 'https://example.com/help'
    '//cdn.example.com/i.png'  -> 'https://cdn.example.com/i.png'
    'http://example.com'       -> 'http://example.com'
    'a.com/go?to=https://b'    -> 'https://a.com/go?to=https://b'
    ''                         -> None
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if SCHEME_PREFIX.match(value):
        return value
    if value.startswith("//"):
        return f"https:{value}"
    return f"{SECURE_SCHEME}{value}"


def select_run_as_account(manifest: PackageManifest) -> str:
    """Install context taken from the last installer in the manifest."""
    if not manifest.installers:
        raise InvalidInput(f"Manifest for {manifest.package_identifier} lists no installers")
    scope = manifest.installers[-1].scope
    if not scope:
        raise InvalidInput(f"Last installer of {manifest.package_identifier} has no scope")
    return scope


def build_app_descriptor(
    descriptor: AppDescriptor, manifest: PackageManifest, icon: IconAsset
) -> BackendAppDescriptor:
    """
    Combine input, manifest, and icon into a backend application descriptor.

    Raises:
        InvalidInput: If the manifest has no versions or no usable installer.
    """
    if not manifest.versions:
        raise InvalidInput(f"Manifest for {manifest.package_identifier} has no versions")

    return BackendAppDescriptor(
        display_name=manifest.package_name,
        developer=manifest.publisher,
        publisher=manifest.publisher,
        description=manifest.short_description,
        information_url=normalize_url(manifest.support_url),
        privacy_information_url=normalize_url(manifest.privacy_url),
        icon=icon,
        run_as_account=select_run_as_account(manifest),
        package_identifier=manifest.package_identifier,
        is_featured=descriptor.is_featured,
    )
